from pathlib import Path
from typing import Any, Dict, List, Optional
from .config import DEFAULT_CONFIG, load_config

_LIST_KEYS = ("inputs", "outputs", "exclude")
_SCALAR_KEYS = ("state_dir", "log", "command", "debounce_ms")


def _to_list_arg(value: Optional[List[Any]]) -> Optional[List[str]]:
    """
    Normalize repeatable CLI arg handling.
    argparse may give None, a list of single string, or multiple entries.
    We want either None or a flat list.
    """
    if value is None:
        return None
    # if user passed the flag multiple times, flatten them
    flat = []
    for v in value:
        if isinstance(v, list):
            flat.extend(v)
        else:
            flat.append(v)
    return flat


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def build_settings(args: Any, config_path: Optional[str]) -> Dict[str, Any]:
    """
    Build final settings using priority:
      DEFAULTS <- config file <- CLI args (non-None)
    Args:
      args: argparse.Namespace (CLI arguments)
      config_path: explicit config file path (string) or None
    Returns:
      dict with keys: state_dir, inputs, outputs, exclude, log, command, debounce_ms
    """
    # 1) Load defaults and config file
    cfg_path = Path(config_path) if config_path else Path("inctask.yml")
    user_cfg = load_config(cfg_path)

    final = DEFAULT_CONFIG.copy()
    final.update(user_cfg)  # config overrides defaults

    # 2) CLI overrides (only if provided / not None)
    for key in _SCALAR_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            final[key] = value

    for key in _LIST_KEYS:
        cli_value = _to_list_arg(getattr(args, key, None))
        if cli_value is not None:
            final[key] = cli_value

    # ensure types: list settings are always lists
    for key in _LIST_KEYS:
        final[key] = _as_list(final.get(key))

    return final

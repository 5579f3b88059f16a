import yaml
from pathlib import Path

DEFAULT_CONFIG = {
    "state_dir": ".inctask",
    "inputs": [],
    "outputs": [],
    "exclude": [],
    "log": "inctask_runs.jsonl",
    "command": None,
    "debounce_ms": 600,
}

def load_config(path: Path) -> dict:
    # If config file missing → return defaults
    if not path.exists():
        return DEFAULT_CONFIG.copy()

    # Load YAML
    with path.open("r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(user_config).__name__}")

    # Merge defaults with user config
    final_config = DEFAULT_CONFIG.copy()
    final_config.update(user_config)

    return final_config

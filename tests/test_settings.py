from argparse import Namespace
from pathlib import Path

import pytest

from inctask.config import DEFAULT_CONFIG, load_config
from inctask.settings import build_settings

def test_load_config_missing_returns_defaults(tmp_path: Path):
    assert load_config(tmp_path / "nope.yml") == DEFAULT_CONFIG

def test_load_config_merges_user_values(tmp_path: Path):
    cfg = tmp_path / "inctask.yml"
    cfg.write_text("state_dir: build/.state\ninputs:\n  - src\n", encoding="utf-8")
    final = load_config(cfg)
    assert final["state_dir"] == "build/.state"
    assert final["inputs"] == ["src"]
    assert final["log"] == DEFAULT_CONFIG["log"]

def test_load_config_rejects_non_mapping(tmp_path: Path):
    cfg = tmp_path / "bad.yml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(cfg)

def test_cli_overrides_config(tmp_path: Path):
    cfg = tmp_path / "inctask.yml"
    cfg.write_text(
        "state_dir: from-config\ninputs: [a]\noutputs: out\ncommand: make\n",
        encoding="utf-8",
    )
    args = Namespace(
        state_dir="from-cli",
        inputs=[["x", "y"], ["z"]],
        outputs=None,
        exclude=None,
        log=None,
        command=None,
    )
    final = build_settings(args, str(cfg))
    assert final["state_dir"] == "from-cli"
    assert final["inputs"] == ["x", "y", "z"]
    # scalar in YAML becomes a one element list
    assert final["outputs"] == ["out"]
    assert final["command"] == "make"
    assert final["exclude"] == []

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .comparator import split_changes
from .engine import RunDecision

def append_log(path: Path, event: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    event["timestamp"] = datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"

    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")

def log_run(path: Path, decision: Optional[RunDecision], status: str, **extra) -> dict:
    """
    Append one run record: the chosen mode, the changed inputs grouped by
    change type, and whether the action succeeded.
    """
    event = {
        "event": "run",
        "mode": str(decision.mode) if decision else None,
        "status": status,
        **split_changes(decision.changed_inputs if decision else {}),
        **extra,
    }
    append_log(path, event)
    return event

"""
Snapshot store: durable form of "the fingerprints of a set of files as of the
last successful run".

Missing or unreadable-as-a-snapshot files load as ``None``. Real I/O failures
(permissions, disk) are not masked.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .scanner import scan_roots
from .schema import build_snapshot_structure, parse_snapshot_structure
from .snapshot import Snapshot
from .storage.json_store import load_json, save_json

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> Optional[Snapshot]:
    path = Path(path)
    try:
        data = load_json(path)
    except ValueError as e:
        logger.warning("Ignoring corrupt state file %s: %s", path, e)
        return None

    if data is None:
        return None

    try:
        return parse_snapshot_structure(data)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable state file %s: %s", path, e)
        return None


def write_snapshot(path: Path, snapshot: Snapshot) -> None:
    path = Path(path)
    save_json(path, build_snapshot_structure(snapshot))
    logger.debug("Wrote %d fingerprint(s) to %s", len(snapshot), path)


def scan(
    roots: Iterable[str],
    exclude: Optional[List[str]] = None,
    ignore: Iterable[str] = (),
) -> Snapshot:
    return scan_roots(roots, exclude=exclude, ignore=ignore)

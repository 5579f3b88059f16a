from datetime import datetime, timezone

from .hasher import HASH_ALGO
from .snapshot import Fingerprint, Snapshot

SNAPSHOT_SCHEMA_VERSION = 1


def build_snapshot_structure(snapshot: Snapshot) -> dict:
    return {
        "schema_version": SNAPSHOT_SCHEMA_VERSION,
        "created_at": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
        "hash_algo": HASH_ALGO,
        "roots": list(snapshot.roots),
        "files": {path: fp.to_dict() for path, fp in sorted(snapshot.files.items())},
    }


def parse_snapshot_structure(data: object) -> Snapshot:
    """
    Inverse of build_snapshot_structure. Raises ValueError (or KeyError /
    TypeError for malformed entries) when the document is not a snapshot this
    version can read.
    """
    if not isinstance(data, dict):
        raise ValueError("snapshot document must be a JSON object")
    if data.get("schema_version") != SNAPSHOT_SCHEMA_VERSION:
        raise ValueError(f"unsupported schema_version: {data.get('schema_version')!r}")
    if data.get("hash_algo") != HASH_ALGO:
        raise ValueError(f"unsupported hash_algo: {data.get('hash_algo')!r}")

    roots = data.get("roots", [])
    files = data.get("files", {})
    if not isinstance(roots, list) or not isinstance(files, dict):
        raise ValueError("snapshot roots/files have the wrong type")

    return Snapshot(
        roots=tuple(str(r) for r in roots),
        files={str(path): Fingerprint.from_dict(meta) for path, meta in files.items()},
    )

from pathlib import Path
import hashlib

HASH_ALGO = "sha256"
_CHUNK_SIZE = 8192


def hash_file(path: Path) -> str:
    """
    Compute SHA-256 of a file and return the hex digest.

    Errors are not swallowed: a missing file raises FileNotFoundError and an
    unreadable one raises PermissionError/OSError. The scanner decides which of
    those are fatal.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()

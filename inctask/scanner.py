import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from fnmatch import fnmatch

from .hasher import hash_file
from .snapshot import Fingerprint, Snapshot
from .utils import is_within, normalize_path

logger = logging.getLogger(__name__)


def _matches_exclude_patterns(rel_path: str, patterns: List[str]) -> bool:
    """
    Return True if rel_path should be excluded according to patterns.
    Supports simple glob patterns (fnmatch) and negation with leading '!'.
    Rules:
      - Patterns are checked in order. A matching positive pattern excludes the path.
      - If a later negation pattern ('!pattern') matches, the path is included again.
    This is a simplified gitignore-like behavior.
    """
    if not patterns:
        return False

    excluded = False
    for pat in patterns:
        if pat == "":
            continue
        if pat.startswith("!"):
            neg = pat[1:]
            # if negation matches, un-exclude
            if fnmatch(rel_path, neg):
                excluded = False
        else:
            # positive match -> exclude
            if fnmatch(rel_path, pat):
                excluded = True
    return excluded


def _raise_walk_error(err: OSError) -> None:
    # a directory removed while walking is the same as a file vanishing mid-scan
    if isinstance(err, FileNotFoundError):
        logger.debug("Directory vanished during scan: %s", err.filename)
        return
    raise err


def iter_root_files(
    root: str,
    exclude: Optional[List[str]] = None,
    ignore: Iterable[str] = (),
) -> Iterator[Tuple[str, Path]]:
    """
    Yield (absolute path string, Path) for every regular file a root expands to.

    - a file root yields itself
    - a directory root yields every regular file beneath it, recursively
    - a missing root yields nothing

    Paths equal to or under an ``ignore`` entry (normalized absolute paths)
    are never yielded, and ignored directories are not descended.

    Symlinked directories are not descended. Symlinks to files are followed
    for hashing; broken links and special files are skipped. A directory that
    cannot be listed raises its OSError.
    """
    exclude = exclude or []
    ignore = [normalize_path(p) for p in ignore]
    root_path = Path(root)

    def ignored(key: str) -> bool:
        return any(is_within(key, p) for p in ignore)

    if root_path.is_file():
        key = normalize_path(root_path)
        if not ignored(key) and not _matches_exclude_patterns(root_path.name, exclude):
            yield key, root_path
        return

    if not root_path.is_dir() or ignored(normalize_path(root_path)):
        return

    for dirpath, dirs, files in os.walk(root_path, onerror=_raise_walk_error, followlinks=False):
        dirs[:] = sorted(d for d in dirs if not ignored(normalize_path(os.path.join(dirpath, d))))
        for filename in sorted(files):
            file_path = Path(dirpath) / filename
            rel_path = file_path.relative_to(root_path).as_posix()

            # Skip excluded patterns (supports glob and simple negation)
            if _matches_exclude_patterns(rel_path, exclude):
                continue
            key = normalize_path(file_path)
            if ignored(key) or not file_path.is_file():
                continue
            yield key, file_path


def scan_roots(
    roots: Iterable[str],
    exclude: Optional[List[str]] = None,
    ignore: Iterable[str] = (),
) -> Snapshot:
    """
    Walk every root and fingerprint each file found:
    {
        "/abs/path/file.txt": Fingerprint(hash="...", size=1234, mtime=1700000000),
        ...
    }

    A file or directory that disappears between listing and reading is
    skipped. Any other OSError (permissions, I/O) propagates to the caller.
    """
    roots = tuple(roots)
    ignore = tuple(ignore)
    results: Dict[str, Fingerprint] = {}

    for root in roots:
        for key, file_path in iter_root_files(root, exclude, ignore):
            if key in results:
                # overlapping roots
                continue
            try:
                stat = file_path.stat()
                file_hash = hash_file(file_path)
            except FileNotFoundError:
                # File disappeared mid-scan (rare but possible)
                logger.debug("File vanished during scan: %s", file_path)
                continue

            results[key] = Fingerprint(
                hash=file_hash,
                size=stat.st_size,
                mtime=int(stat.st_mtime),
            )

    logger.debug("Scanned %d root(s), %d file(s)", len(roots), len(results))
    return Snapshot(roots=roots, files=results)

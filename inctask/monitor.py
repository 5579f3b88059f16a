"""
File monitor: tracks one group of root paths (inputs or outputs) and reports
which files under them changed since the loaded snapshot.

A monitor lives for a single task invocation. It is loaded at most once,
scanned to answer change queries and then discarded.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .comparator import compare_snapshots
from .snapshot import ChangeSet, Snapshot
from .store import load_snapshot, scan, write_snapshot
from .utils import PathLike, normalize_path

logger = logging.getLogger(__name__)


class FileMonitor:
    def __init__(self, exclude: Optional[List[str]] = None, ignore: Iterable[PathLike] = ()) -> None:
        self.exclude = list(exclude or [])
        # never scanned, even when under a registered root
        self.ignore = [normalize_path(p) for p in ignore]
        self._roots: List[str] = []
        self._history: Optional[Snapshot] = None
        # set by rebaseline(); write() persists it instead of rescanning
        self._baseline: Optional[Snapshot] = None

    @property
    def roots(self) -> Tuple[str, ...]:
        return tuple(self._roots)

    @property
    def history(self) -> Optional[Snapshot]:
        return self._history

    def register_root(self, path: PathLike) -> None:
        """
        Track ``path`` (file or directory). Directories are expanded at scan
        time, so files added under them later are picked up.
        """
        root = normalize_path(path)
        if root not in self._roots:
            self._roots.append(root)

    def load(self, state_path: PathLike) -> bool:
        self._history = load_snapshot(Path(state_path))
        return self._history is not None

    def reset(self) -> None:
        self._history = None
        self._baseline = None

    def scan(self) -> Snapshot:
        return scan(self._roots, exclude=self.exclude, ignore=self.ignore)

    def write(self, state_path: PathLike) -> None:
        snapshot = self._baseline if self._baseline is not None else self.scan()
        write_snapshot(Path(state_path), snapshot)

    def changed_files(self) -> ChangeSet:
        """
        Diff a fresh scan against the loaded history. Without history every
        live file is reported as created, so callers check load() first.
        """
        history = self._history if self._history is not None else Snapshot.empty()
        changes = compare_snapshots(history, self.scan())
        logger.debug("%d changed file(s) under %d root(s)", len(changes), len(self._roots))
        return changes

    def rebaseline(self, paths: Iterable[PathLike]) -> None:
        self._roots = []
        for path in paths:
            self.register_root(path)
        self._baseline = self.scan()
        self._history = self._baseline

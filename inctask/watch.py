"""
Watch mode built on top of watchdog.

Watches the input roots and re-runs the task after a quiet period. The engine
still makes the full/incremental/skip decision on every run; watchdog events
only decide *when* to ask.

Design principles:
1. Events are hints, the snapshot diff is the truth
2. Bursts of events collapse into one run (debounce)
3. Runs never overlap: one writer per state directory
"""
from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .scanner import _matches_exclude_patterns
from .utils import PathLike, is_within, normalize_path

logger = logging.getLogger(__name__)

_RELEVANT_KINDS = ("created", "modified", "deleted", "moved")


@dataclass(frozen=True)
class NormalizedEvent:
    """
    Normalized event that watch mode processes.
    MOVED is normalized to DELETE + CREATE.
    """

    kind: str  # "created" | "modified" | "deleted"
    path: str


def normalize_event(kind: str, src_path: str, dest_path: Optional[str] = None) -> List[NormalizedEvent]:
    """
    Raw event -> normalized:
    - moved -> deleted(src) + created(dest)
    - created / modified / deleted -> passthrough
    - anything else (opened, closed, ...) -> ignored
    """
    k = kind.lower().strip()
    if k == "moved":
        events = [NormalizedEvent(kind="deleted", path=normalize_path(src_path))]
        if dest_path:
            events.append(NormalizedEvent(kind="created", path=normalize_path(dest_path)))
        return events
    if k in _RELEVANT_KINDS:
        return [NormalizedEvent(kind=k, path=normalize_path(src_path))]
    return []


class WatchHandler(FileSystemEventHandler):
    """
    Collapses filesystem events under the watched roots into calls to
    ``on_change`` once no event arrived for ``debounce_ms``.
    """

    def __init__(
        self,
        roots: Iterable[PathLike],
        on_change: Callable[[], None],
        exclude: Optional[List[str]] = None,
        ignore: Iterable[PathLike] = (),
        debounce_ms: int = 600,
    ) -> None:
        self.roots = [normalize_path(r) for r in roots]
        self.on_change = on_change
        self.exclude = exclude or []
        self.ignore = [normalize_path(p) for p in ignore]

        self.debounce_seconds = max(0.0, debounce_ms / 1000.0)
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    # ---- helpers ---------------------------------------------------------
    def is_relevant(self, path: str) -> bool:
        if any(is_within(path, ignored) for ignored in self.ignore):
            return False
        for root in self.roots:
            if not is_within(path, root):
                continue
            if path == root:
                rel_path = os.path.basename(path)
            else:
                rel_path = Path(os.path.relpath(path, root)).as_posix()
            if not _matches_exclude_patterns(rel_path, self.exclude):
                return True
        return False

    # ---- debounce --------------------------------------------------------
    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.debounce_seconds, self.fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def fire(self) -> None:
        with self._lock:
            self._timer = None
        # serialize runs; a burst during a run schedules the next one
        with self._run_lock:
            try:
                self.on_change()
            except Exception:
                logger.exception("Run triggered by file change failed")

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    # ---- event processors ------------------------------------------------
    def on_any_event(self, event: FileSystemEvent) -> None:
        dest_path = getattr(event, "dest_path", None) or None
        for ne in normalize_event(event.event_type, os.fsdecode(event.src_path), dest_path and os.fsdecode(dest_path)):
            if event.is_directory and ne.kind == "modified":
                # content events for the files themselves follow
                continue
            if self.is_relevant(ne.path):
                logger.debug("[%s] %s", ne.kind.upper(), ne.path)
                self.schedule()
                return


def _build_observer(use_polling: bool = False):
    """
    Create a watchdog observer. PollingObserver is slower but more compatible
    across filesystems; used as a fallback when requested.
    """
    if use_polling:
        return PollingObserver()
    return Observer()


def watch(
    roots: Iterable[PathLike],
    run_once: Callable[[], None],
    exclude: Optional[List[str]] = None,
    ignore: Iterable[PathLike] = (),
    debounce_ms: int = 600,
    use_polling: bool = False,
) -> None:
    """
    Run once, then again after every burst of changes under ``roots``.
    Blocks until KeyboardInterrupt.
    """
    roots = [normalize_path(r) for r in roots]
    handler = WatchHandler(roots, run_once, exclude=exclude, ignore=ignore, debounce_ms=debounce_ms)
    observer = _build_observer(use_polling)

    for root in roots:
        if os.path.isdir(root):
            observer.schedule(handler, root, recursive=True)
        elif os.path.isfile(root):
            observer.schedule(handler, os.path.dirname(root), recursive=False)
        else:
            logger.warning("Not watching missing root %s", root)

    handler.fire()
    observer.start()

    print(f"Watching {len(roots)} input root(s) for changes... (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("Stopping watcher...")
    finally:
        handler.cancel()
        observer.stop()
        observer.join()

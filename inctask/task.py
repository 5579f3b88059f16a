"""
Base class for file based tasks that can run incrementally.

Subclasses implement do_full_run() and do_incremental_run(); run() decides
which one to call based on the state kept in ``incremental_directory``.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional, Set

from .engine import IncrementalRunner, RunActions, RunDecision
from .scanner import iter_root_files
from .snapshot import ChangeSet
from .utils import PathLike, normalize_path

logger = logging.getLogger(__name__)


class IncrementalTask:
    def __init__(
        self,
        name: str,
        incremental_directory: Optional[PathLike] = None,
        input_files: Optional[Iterable[PathLike]] = None,
        exclude: Optional[List[str]] = None,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise TypeError("Tasks need a name specified")
        if not isinstance(incremental_directory, (str, os.PathLike)) or not os.fspath(incremental_directory):
            raise TypeError("Incremental tasks need an incremental_directory specified")

        self.name = name
        self._incremental_directory = Path(incremental_directory)
        self._incremental_directory.mkdir(parents=True, exist_ok=True)
        self._runner = IncrementalRunner(self._incremental_directory, exclude=exclude)

        self._input_files: Set[str] = {normalize_path(p) for p in (input_files or [])}
        self._output_files: Set[str] = set()
        self._registered_output_paths: List[str] = []

    @property
    def incremental_directory(self) -> Path:
        return self._incremental_directory

    @property
    def input_files(self) -> Set[str]:
        return self._input_files

    @input_files.setter
    def input_files(self, input_files: Iterable[PathLike]) -> None:
        self._input_files = {normalize_path(p) for p in input_files}

    @property
    def output_files(self) -> Set[str]:
        """Files the task produced, filled in by collect_output_files()."""
        return self._output_files

    @property
    def incremental_outputs(self) -> List[str]:
        """
        Files or directories this task generates. Changes to them outside the
        task force a full run. Defaults to the registered output paths.
        """
        return list(self._registered_output_paths)

    @property
    def last_decision(self) -> Optional[RunDecision]:
        return self._runner.last_decision

    def add_input_file(self, path: PathLike) -> None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input file {path} does not exist.")
        self._input_files.add(normalize_path(path))

    def add_input_directory(self, path: PathLike) -> None:
        """Add every regular file under ``path``. A missing directory is ignored."""
        if not os.path.isdir(path):
            return
        for key, _ in iter_root_files(os.fspath(path)):
            self._input_files.add(key)

    def register_output_path(self, path: PathLike) -> None:
        output_path = normalize_path(path)
        if output_path not in self._registered_output_paths:
            self._registered_output_paths.append(output_path)

    def collect_output_files(self) -> Set[str]:
        """Rebuild output_files from what currently exists under the output paths."""
        self._output_files = {
            key
            for output_path in self._registered_output_paths
            for key, _ in iter_root_files(output_path)
        }
        return self._output_files

    async def do_full_run(self) -> Any:
        raise NotImplementedError("No full task action implemented, override do_full_run")

    async def do_incremental_run(self, changed_files: ChangeSet) -> Any:
        raise NotImplementedError("No incremental task action implemented, override do_incremental_run")

    async def load_result_and_skip(self) -> Any:
        """
        Called when nothing changed. Override to restore a result from the
        previous run; does nothing by default.
        """
        return None

    async def run(self) -> Any:
        logger.debug("Starting task %s", self.name)
        actions = RunActions(
            full=self.do_full_run,
            incremental=self.do_incremental_run,
            skip=self.load_result_and_skip,
        )
        result = await self._runner.run(
            sorted(self.input_files),
            self.incremental_outputs,
            actions,
            committed_outputs=lambda: self.incremental_outputs,
        )
        self.collect_output_files()
        logger.debug("Finished task %s (%s)", self.name, self.last_decision.mode)
        return result

"""
Change manager: pairs an inputs monitor with an outputs monitor and persists
both as one unit under a state directory.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from .monitor import FileMonitor
from .snapshot import ChangeSet
from .utils import PathLike

logger = logging.getLogger(__name__)

INPUTS_STATE_FILENAME = "inputs.state"
OUTPUTS_STATE_FILENAME = "outputs.state"


class ChangeManager:
    def __init__(self, exclude: Optional[List[str]] = None, ignore: Iterable[PathLike] = ()) -> None:
        ignore = list(ignore)
        self._inputs = FileMonitor(exclude=exclude, ignore=ignore)
        self._outputs = FileMonitor(exclude=exclude, ignore=ignore)

    @property
    def inputs(self) -> FileMonitor:
        return self._inputs

    @property
    def outputs(self) -> FileMonitor:
        return self._outputs

    def load(self, state_dir: PathLike) -> bool:
        """
        Load both snapshots. Returns True only if both files exist and parse;
        otherwise neither monitor keeps any loaded history.
        """
        state_dir = Path(state_dir)
        inputs_file = state_dir / INPUTS_STATE_FILENAME
        outputs_file = state_dir / OUTPUTS_STATE_FILENAME
        if not inputs_file.exists() or not outputs_file.exists():
            logger.debug("No complete state in %s", state_dir)
            return False

        if self._inputs.load(inputs_file) and self._outputs.load(outputs_file):
            return True

        self._inputs.reset()
        self._outputs.reset()
        return False

    def write(self, state_dir: PathLike) -> None:
        # inputs first, then outputs; a crash in between leaves outputs stale
        state_dir = Path(state_dir)
        state_dir.mkdir(parents=True, exist_ok=True)

        self._inputs.write(state_dir / INPUTS_STATE_FILENAME)
        self._outputs.write(state_dir / OUTPUTS_STATE_FILENAME)

    def delete(self, state_dir: PathLike) -> None:
        """
        Remove everything inside state_dir, keeping the directory itself.
        """
        state_dir = Path(state_dir)
        if not state_dir.is_dir():
            return
        for entry in state_dir.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        logger.debug("Emptied state directory %s", state_dir)

    def register_input_root(self, path: PathLike) -> None:
        self._inputs.register_root(path)

    def register_output_root(self, path: PathLike) -> None:
        self._outputs.register_root(path)

    def changed_inputs(self) -> ChangeSet:
        return self._inputs.changed_files()

    def changed_outputs(self) -> ChangeSet:
        return self._outputs.changed_files()

    def has_changes(self) -> bool:
        # both sides are always scanned
        changed_inputs = self.changed_inputs()
        changed_outputs = self.changed_outputs()
        return bool(changed_inputs) or bool(changed_outputs)

    def rebaseline_outputs(self, paths: Iterable[PathLike]) -> None:
        self._outputs.rebaseline(paths)

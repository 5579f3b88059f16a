"""
Incremental run decision engine.

Given declared input and output roots, picks one of three run modes:

1. No usable state in the state directory  -> full run
2. Output files changed since the last run -> full run
3. Input files changed                     -> incremental run over those files
4. Nothing changed                         -> skip

Exactly one action is awaited. On success the outputs are re-baselined from
the declared outputs and both snapshots are written. On failure the state
directory is emptied and the original exception is re-raised, so the next
invocation starts with a full run.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from .change_manager import ChangeManager
from .snapshot import ChangeSet
from .utils import PathLike

logger = logging.getLogger(__name__)


class RunMode(str, Enum):
    FULL = "full"
    INCREMENTAL = "incremental"
    SKIP = "skip"

    def __str__(self) -> str:
        return self.value


async def _noop_skip() -> None:
    return None


@dataclass(frozen=True)
class RunActions:
    """
    The three caller-supplied actions. Only the one matching the chosen
    RunMode is awaited.
    """

    full: Callable[[], Awaitable[Any]]
    incremental: Callable[[ChangeSet], Awaitable[Any]]
    skip: Callable[[], Awaitable[Any]] = _noop_skip


@dataclass(frozen=True)
class RunDecision:
    mode: RunMode
    reason: str
    changed_inputs: ChangeSet = field(default_factory=dict)
    changed_outputs: ChangeSet = field(default_factory=dict)


def decide(manager: ChangeManager, loaded: bool) -> RunDecision:
    """
    Evaluate the branches in order. Each monitor is scanned at most once and
    outputs are checked before inputs.
    """
    if not loaded:
        return RunDecision(RunMode.FULL, "No incremental data, do full task run")

    changed_outputs = manager.changed_outputs()
    if changed_outputs:
        return RunDecision(
            RunMode.FULL,
            "Output files changed, do full task run",
            changed_outputs=changed_outputs,
        )

    changed_inputs = manager.changed_inputs()
    if changed_inputs:
        return RunDecision(
            RunMode.INCREMENTAL,
            "Input files changed, do incremental task run",
            changed_inputs=changed_inputs,
        )

    return RunDecision(RunMode.SKIP, "Nothing changed, skip task run")


def validate_state_dir(state_dir: Any) -> Path:
    if not isinstance(state_dir, (str, os.PathLike)):
        raise TypeError(f"state directory must be a path, got {type(state_dir).__name__}")
    if not os.fspath(state_dir):
        raise ValueError("state directory must not be empty")
    return Path(state_dir)


class IncrementalRunner:
    """
    Runs a task against one state directory. The caller guarantees that no two
    runs share a state directory concurrently.
    """

    def __init__(
        self,
        state_dir: PathLike,
        *,
        exclude: Optional[List[str]] = None,
        ignore: Iterable[PathLike] = (),
        manager_factory: Optional[Callable[..., ChangeManager]] = None,
    ) -> None:
        self.state_dir = validate_state_dir(state_dir)
        self.exclude = list(exclude or [])
        # the state directory is rewritten by every run and never fingerprinted
        self.ignore = [self.state_dir, *ignore]
        self._manager_factory = manager_factory or ChangeManager
        self.last_decision: Optional[RunDecision] = None

    def _prepare(self, inputs: Iterable[PathLike], outputs: Iterable[PathLike]):
        manager = self._manager_factory(exclude=self.exclude, ignore=self.ignore)
        loaded = manager.load(self.state_dir)

        for input_path in inputs:
            manager.register_input_root(input_path)
        for output_path in outputs:
            manager.register_output_root(output_path)

        return manager, loaded

    def inspect(self, inputs: Iterable[PathLike], outputs: Iterable[PathLike]) -> RunDecision:
        """
        Report the decision a run would make, without running anything or
        touching the state directory.
        """
        manager, loaded = self._prepare(inputs, outputs)
        return decide(manager, loaded)

    async def run(
        self,
        inputs: Iterable[PathLike],
        outputs: Iterable[PathLike],
        actions: RunActions,
        *,
        committed_outputs: Optional[Callable[[], Iterable[PathLike]]] = None,
    ) -> Any:
        """
        Decide, await the selected action and commit or roll back.

        ``committed_outputs`` is evaluated after a successful action and names
        the outputs to record; it defaults to ``outputs``.

        If the action raises, the state directory is emptied and that exception
        is re-raised unchanged. An OSError from emptying the directory replaces
        it; the action's exception is then its ``__context__``.
        """
        outputs = list(outputs)
        manager, loaded = self._prepare(inputs, outputs)

        decision = decide(manager, loaded)
        self.last_decision = decision
        logger.debug(decision.reason)

        try:
            if decision.mode is RunMode.FULL:
                result = await actions.full()
            elif decision.mode is RunMode.INCREMENTAL:
                result = await actions.incremental(decision.changed_inputs)
            else:
                result = await actions.skip()
        except Exception:
            logger.warning("%s run failed, clearing state in %s", decision.mode, self.state_dir)
            manager.delete(self.state_dir)
            raise

        final_outputs = committed_outputs() if committed_outputs is not None else outputs
        manager.rebaseline_outputs(final_outputs)
        manager.write(self.state_dir)
        return result


async def run_incremental(
    state_dir: PathLike,
    inputs: Iterable[PathLike],
    outputs: Iterable[PathLike],
    actions: RunActions,
    *,
    exclude: Optional[List[str]] = None,
    ignore: Iterable[PathLike] = (),
    committed_outputs: Optional[Callable[[], Iterable[PathLike]]] = None,
) -> Any:
    runner = IncrementalRunner(state_dir, exclude=exclude, ignore=ignore)
    return await runner.run(inputs, outputs, actions, committed_outputs=committed_outputs)

"""Shell command actions for the CLI."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from .engine import RunActions, RunMode
from .snapshot import ChangeSet

logger = logging.getLogger(__name__)

ENV_MODE = "INCTASK_MODE"
ENV_CHANGED_FILES = "INCTASK_CHANGED_FILES"


class CommandError(RuntimeError):
    """Raised when the task command exits non-zero."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Command failed ({returncode}): {command}")
        self.command = command
        self.returncode = returncode


@dataclass(frozen=True)
class CommandResult:
    command: str
    mode: RunMode
    returncode: int


async def run_command(
    command: str,
    mode: RunMode,
    changed_files: Optional[ChangeSet] = None,
    cwd: Optional[str] = None,
) -> CommandResult:
    env: Dict[str, str] = dict(os.environ)
    env[ENV_MODE] = str(mode)
    env[ENV_CHANGED_FILES] = json.dumps({path: str(kind) for path, kind in sorted((changed_files or {}).items())})

    logger.info("Running %s: %s", mode, command)
    process = await asyncio.create_subprocess_shell(command, cwd=cwd, env=env)
    returncode = await process.wait()
    if returncode != 0:
        raise CommandError(command, returncode)
    return CommandResult(command=command, mode=mode, returncode=returncode)


def command_actions(command: str, cwd: Optional[str] = None) -> RunActions:
    """
    Full and incremental runs execute the same command; the mode and changed
    files are passed through the environment. Skips do not run it.
    """

    async def full() -> CommandResult:
        return await run_command(command, RunMode.FULL, cwd=cwd)

    async def incremental(changed: ChangeSet) -> CommandResult:
        return await run_command(command, RunMode.INCREMENTAL, changed, cwd=cwd)

    async def skip() -> CommandResult:
        return CommandResult(command=command, mode=RunMode.SKIP, returncode=0)

    return RunActions(full=full, incremental=incremental, skip=skip)

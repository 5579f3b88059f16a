#!/usr/bin/env python3
"""
CLI entrypoint for inctask.

Usage examples:
  python -m inctask status --input src --output build
  python -m inctask run --config inctask.yml
  python -m inctask run --input src --output build --command "make"
  python -m inctask watch --config inctask.yml
  python -m inctask reset --state-dir .inctask
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from .change_manager import ChangeManager
from .comparator import split_changes
from .engine import IncrementalRunner, RunDecision
from .logger import log_run
from .logging_config import configure_file_logging
from .runner import CommandError, command_actions
from .settings import build_settings
from .watch import watch


def _print_changes(title: str, changes: Dict[str, Any]) -> None:
    grouped = split_changes(changes)
    if not any(grouped.values()):
        return
    print(f"\n=== {title} ===")
    for kind, marker in (("created", "+"), ("modified", "*"), ("deleted", "-")):
        if grouped[kind]:
            print(f"\n[{kind.upper()}]")
            for p in grouped[kind]:
                print(f" {marker}", p)


def _print_decision(decision: RunDecision) -> None:
    print(f"Mode: {decision.mode} ({decision.reason})")
    _print_changes("Changed outputs", decision.changed_outputs)
    _print_changes("Changed inputs", decision.changed_inputs)


def _runner_from_settings(settings: Dict[str, Any]) -> IncrementalRunner:
    return IncrementalRunner(settings["state_dir"], exclude=settings["exclude"], ignore=[settings["log"]])


def _run_once(settings: Dict[str, Any]) -> int:
    """
    One engine run of the configured command, logged to the JSONL run log.
    Returns the process exit status.
    """
    command = settings.get("command")
    if not command:
        print("ERROR: no command configured. Pass --command or set `command` in the config file.")
        return 2

    runner = _runner_from_settings(settings)
    log_path = Path(settings["log"])
    actions = command_actions(command)

    try:
        asyncio.run(runner.run(settings["inputs"], settings["outputs"], actions))
    except CommandError as e:
        decision = runner.last_decision
        print(f"ERROR: {e}. Incremental state cleared; next run will be full.")
        log_run(log_path, decision, "failed", returncode=e.returncode)
        return 1

    decision = runner.last_decision
    _print_decision(decision)
    log_run(log_path, decision, "ok")
    print(f"\nLogged to {log_path}")
    return 0


def status_command(args: Any) -> int:
    """
    Show which mode the next run would use. Nothing is executed or written.
    """
    settings = build_settings(args, args.config)
    decision = _runner_from_settings(settings).inspect(settings["inputs"], settings["outputs"])
    _print_decision(decision)
    return 0


def run_command(args: Any) -> int:
    settings = build_settings(args, args.config)
    return _run_once(settings)


def reset_command(args: Any) -> int:
    settings = build_settings(args, args.config)
    state_dir = Path(settings["state_dir"])
    ChangeManager().delete(state_dir)
    print(f"Cleared incremental state in {state_dir}")
    return 0


def watch_command(args: Any) -> int:
    settings = build_settings(args, args.config)
    if not settings.get("command"):
        print("ERROR: no command configured. Pass --command or set `command` in the config file.")
        return 2

    watch(
        settings["inputs"],
        lambda: _run_once(settings),
        exclude=settings["exclude"],
        ignore=[settings["state_dir"], settings["log"], *settings["outputs"]],
        debounce_ms=int(settings["debounce_ms"]),
        use_polling=args.polling,
    )
    return 0


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", help="Path to YAML config file", default=None)
    p.add_argument("--state-dir", dest="state_dir", help="Directory holding incremental state", default=None)
    p.add_argument("--log", help="Path to JSONL run log", default=None)
    p.add_argument("--log-file", dest="log_file", help="Path to diagnostic log file", default=None)
    p.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions at DEBUG level")
    for flag, dest, what in (
        ("--input", "inputs", "Input file or directory"),
        ("--output", "outputs", "Output file or directory"),
        ("--exclude", "exclude", "Exclude patterns"),
    ):
        p.add_argument(
            flag,
            dest=dest,
            nargs="*",
            action="append",
            help=f"{what} (can be passed multiple times)",
            default=None,
        )


def build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inctask", description="Incremental task runner")
    sub = parser.add_subparsers(dest="command_name", required=True)

    p_status = sub.add_parser("status", help="Show whether the next run would be full, incremental or skipped")
    _add_common_arguments(p_status)

    p_run = sub.add_parser("run", help="Run the task command if inputs or outputs changed")
    _add_common_arguments(p_run)
    p_run.add_argument("--command", help="Shell command to run", default=None)

    p_reset = sub.add_parser("reset", help="Delete incremental state so the next run is full")
    _add_common_arguments(p_reset)

    p_watch = sub.add_parser("watch", help="Run the task command whenever inputs change")
    _add_common_arguments(p_watch)
    p_watch.add_argument("--command", help="Shell command to run", default=None)
    p_watch.add_argument("--debounce-ms", dest="debounce_ms", type=int, default=None)
    p_watch.add_argument("--polling", action="store_true", help="Use the polling observer")

    return parser


_COMMANDS = {
    "status": status_command,
    "run": run_command,
    "reset": reset_command,
    "watch": watch_command,
}


def main(argv=None) -> int:
    parser = build_cli()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("inctask").setLevel(logging.DEBUG)
    if args.log_file:
        configure_file_logging(args.log_file, verbose=args.verbose)

    handler = _COMMANDS.get(args.command_name)
    if handler is None:
        parser.print_help()
        return 2
    try:
        return handler(args)
    except (TypeError, ValueError) as e:
        # misconfiguration (bad state_dir, malformed config)
        print(f"ERROR: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())

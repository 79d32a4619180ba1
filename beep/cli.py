"""
Replay host events through the dispatcher.

    python -m beep --directory . --dry-run --events events.jsonl

Each input line is either a host event (`{"type": "session.status", ...}`) or a
hook call (`{"hook": "permission.ask", "input": {...}, "output": {...}}`).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

from dotenv import load_dotenv
from loguru import logger

from .config_loader import read_config
from .dispatcher import BeepDispatcher
from .events import PERMISSION_ASK_HOOK, TOOL_EXECUTE_BEFORE_HOOK
from .logging_config import setup_logging
from .notifier import LogNotifier
from .player import NullSoundPlayer
from .types import BeepDecision


async def dispatch_record(dispatcher: BeepDispatcher, record: Any) -> Optional[BeepDecision]:
    if not isinstance(record, dict):
        dispatcher.metrics.ignored_total += 1
        return None
    hook = record.get("hook")
    if hook == PERMISSION_ASK_HOOK:
        return await dispatcher.on_permission_ask(record.get("input") or {}, record.get("output") or {})
    if hook == TOOL_EXECUTE_BEFORE_HOOK:
        return await dispatcher.on_tool_execute_before(record.get("input") or {}, record.get("output"))
    return await dispatcher.on_event(record)


async def replay(dispatcher: BeepDispatcher, lines: Iterable[str]) -> int:
    """Dispatch every JSONL record; returns the number of records read."""
    count = 0
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        count += 1
        try:
            record = json.loads(line)
        except ValueError as e:
            logger.warning(f"line {lineno}: not JSON, skipped ({e})")
            dispatcher.metrics.ignored_total += 1
            continue
        decision = await dispatch_record(dispatcher, record)
        if decision is not None:
            logger.info(f"line {lineno}: {decision.event_key.value} -> {decision.result.value}")
    return count


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opencode-beep",
        description="Replay agent host events (JSONL) through the beep notification rules.",
    )
    parser.add_argument("--directory", default=".", help="Project directory used for config discovery.")
    parser.add_argument("--events", default="-", help="JSONL file with events/hook calls ('-' for stdin).")
    parser.add_argument("--print-config", action="store_true", help="Print the effective config and exit.")
    parser.add_argument("--dry-run", action="store_true", help="Log instead of playing sounds.")
    parser.add_argument("--debug-toast", action="store_true", help="Force debug notices on (written to the log).")
    parser.add_argument("--log-level", default="INFO", help="Logging level, e.g. DEBUG/INFO/WARNING")
    return parser


def _open_events(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return open(Path(path), "r", encoding="utf-8")


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(level=args.log_level, force=True)
    load_dotenv()

    loaded = read_config(args.directory)
    if args.print_config:
        print(json.dumps(loaded.config.to_dict(), indent=2))
        return 0

    config = loaded.config
    if args.debug_toast and not config.debug_toast:
        config = replace(config, debug_toast=True)

    dispatcher = BeepDispatcher(
        config,
        player=NullSoundPlayer() if args.dry_run else None,
        notifier=LogNotifier(),
    )

    stream = _open_events(args.events)
    try:
        asyncio.run(replay(dispatcher, stream))
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    finally:
        if stream is not sys.stdin:
            stream.close()

    print(json.dumps(dispatcher.metrics.summary(), indent=2))
    return 0

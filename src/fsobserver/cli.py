#!/usr/bin/env python3
"""
CLI for observing a directory and printing its events.

Usage:
    fsobserver /path/to/folder
    fsobserver /path/to/folder --recursive --ext .txt .md
    fsobserver /path/to/folder --recursive --files-only --json
"""

import argparse
import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional

from .config import ObserverConfig
from .models import ChangeType, EntryKind, ErrorEvent
from .observer import FileSystemObserver


logger = logging.getLogger("fsobserver.cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


def format_event(event, as_json: bool = False) -> str:
    """Render an event as a single output line."""
    if as_json:
        return json.dumps(event.to_dict())
    if isinstance(event, ErrorEvent):
        return f"error: {event.error}"
    if event.change_type is ChangeType.RENAMED:
        return f"{event.change_type.value} {event.kind.value}: {event.old_name} -> {event.name}"
    return f"{event.change_type.value} {event.kind.value}: {event.name}"


def build_predicate(args):
    """Build the entry predicate selected by --files-only / --dirs-only."""
    if args.files_only:
        return lambda kind, path: kind is EntryKind.FILE
    if args.dirs_only:
        return lambda kind, path: kind is EntryKind.DIRECTORY
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsobserver",
        description="Print filesystem events for a directory, including its subtree",
    )
    parser.add_argument("path", help="Directory to observe")
    parser.add_argument("--filter", default="*", help="Glob pattern entry names must match (default: *)")
    parser.add_argument("--ext", nargs="+", default=[], help="Only report files with these extensions")
    parser.add_argument("-r", "--recursive", action="store_true", help="Watch subdirectories")
    parser.add_argument(
        "--no-subdirectory-events",
        action="store_true",
        help="Do not report events for the contents of created, deleted or renamed directories",
    )
    kind_group = parser.add_mutually_exclusive_group()
    kind_group.add_argument("--files-only", action="store_true", help="Only report file events")
    kind_group.add_argument("--dirs-only", action="store_true", help="Only report directory events")
    parser.add_argument("--json", action="store_true", help="Print one JSON object per event")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = Path(args.path).resolve()
    if not root.is_dir():
        logger.error(f"Path is not a directory: {root}")
        return 1

    config = ObserverConfig(
        path=str(root),
        filter=args.filter,
        file_extensions=args.ext,
        include_subdirectories=args.recursive,
        raise_subdirectory_events=not args.no_subdirectory_events,
    )

    def print_event(event):
        print(format_event(event, args.json), flush=True)

    shutdown = GracefulShutdown()

    with FileSystemObserver(config=config, predicate=build_predicate(args)) as observer:
        for change_type in ChangeType:
            observer.subscribe(change_type, print_event)
        observer.enabled = True

        logger.info(f"Observing {root}")
        logger.info("Press Ctrl+C to stop")

        while not shutdown.should_exit:
            time.sleep(0.5)

    logger.info("Observer stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

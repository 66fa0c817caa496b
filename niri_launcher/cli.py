#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line front end: list ranked entries, launch the best match, or
rebuild the entry cache.
"""
from __future__ import annotations

import sys
import argparse
import logging
from typing import List, Optional

from . import __version__
from .cache import DesktopEntryCache
from .discovery import Aggregator
from .entry import OpenType
from .errors import LauncherError
from .launch import launch_and_record
from .ranking import rank
from .usage import UsageTracker

logger = logging.getLogger(__name__)

_TYPE_LABELS = {
    OpenType.GRAPHICAL: "app",
    OpenType.TERMINAL: "term",
    OpenType.WINDOW: "window",
}


def _load_tracker() -> UsageTracker:
    try:
        return UsageTracker.load()
    except LauncherError as e:
        logger.warning(f"Failed to load usage data: {e}")
        return UsageTracker()


def _cmd_list(args) -> int:
    entries = Aggregator().get_entries()
    for entry in rank(entries, args.query, _load_tracker(), limit=args.limit):
        print(f"{_TYPE_LABELS[entry.open_type]:<6} {entry.name}\t{entry.exec}")
    return 0


def _cmd_launch(args) -> int:
    tracker = _load_tracker()
    ranked = rank(Aggregator().get_entries(), args.query, tracker, limit=1)
    if not ranked:
        logger.error(f"Nothing matches '{args.query}'")
        return 1
    try:
        launch_and_record(ranked[0], tracker)
    except LauncherError as e:
        logger.error(f"Failed to launch '{ranked[0].name}': {e}")
        return 1
    return 0


def _cmd_refresh(args) -> int:
    entries = DesktopEntryCache().refresh()
    print(f"{len(entries)} desktop entries cached")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="niri-launcher", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="print entries ranked for QUERY")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--limit", type=int, default=None)
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("launch", help="launch or focus the best match for QUERY")
    p.add_argument("query")
    p.set_defaults(func=_cmd_launch)

    p = sub.add_parser("refresh", help="rebuild the desktop entry cache")
    p.set_defaults(func=_cmd_refresh)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )
    try:
        return args.func(args)
    except LauncherError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Turning a selected entry into a niri action.

Applications are spawned by niri itself (so they are not children of the
launcher); windows are focused. Failures are reported, never retried: a
second spawn could start the application twice.
"""
from __future__ import annotations

import re
import logging
from typing import List, Optional, Sequence

from . import config
from .entry import Entry, OpenType
from .errors import LauncherError, StorageError, WindowIdError, DispatchError
from .ipc import NiriClient
from .usage import UsageTracker
from .windows import MAX_WINDOW_ID

logger = logging.getLogger(__name__)

_WINDOW_ID_RE = re.compile(r"\+?[0-9]+")


def graphical_command(exec_line: str) -> List[str]:
    # %f, %U, %i... field codes are not expanded; the launcher never passes files.
    return [token for token in exec_line.split() if "%" not in token]


def terminal_command(exec_line: str, terminal: Optional[Sequence[str]] = None) -> List[str]:
    terminal = list(terminal) if terminal is not None else config.terminal_command()
    return terminal + [exec_line]


def parse_window_id(value: str) -> int:
    if not _WINDOW_ID_RE.fullmatch(value):
        raise WindowIdError(f"Invalid window id: {value!r}")
    wid = int(value)
    if wid > MAX_WINDOW_ID:
        raise WindowIdError(f"Window id out of range: {value!r}")
    return wid


def launch_entry(
    entry: Entry,
    client: Optional[NiriClient] = None,
    terminal: Optional[Sequence[str]] = None,
) -> None:
    """
    Spawn or focus `entry`. Raises WindowIdError for a malformed window id
    (before any IPC) and DispatchError for anything niri-side.
    """
    if entry.open_type is OpenType.WINDOW:
        wid = parse_window_id(entry.exec)
        what = f"focus window {wid}"
    elif entry.open_type is OpenType.TERMINAL:
        command = terminal_command(entry.exec, terminal)
        what = f"spawn terminal for '{entry.name}'"
    else:
        command = graphical_command(entry.exec)
        what = f"spawn '{entry.name}'"

    client = client or NiriClient()
    try:
        if entry.open_type is OpenType.WINDOW:
            client.focus_window(wid)
        else:
            client.spawn(command)
    except LauncherError as e:
        raise DispatchError(f"Failed to {what}: {e}") from e
    logger.info(f"Dispatched: {what}")


def launch_and_record(
    entry: Entry,
    tracker: UsageTracker,
    client: Optional[NiriClient] = None,
    terminal: Optional[Sequence[str]] = None,
) -> None:
    """
    Launch, then count the launch. Focusing a window is not application
    usage and is not recorded. A failed save is logged only.
    """
    launch_entry(entry, client, terminal)
    if entry.open_type is OpenType.WINDOW:
        return
    tracker.record_launch(entry.name)
    try:
        tracker.save()
    except StorageError as e:
        logger.warning(f"Failed to save usage data: {e}")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Open niri windows as entries. Never cached: window state changes constantly.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .entry import Entry, OpenType
from .errors import ProtocolError
from .icons import resolve_icon
from .ipc import NiriClient

logger = logging.getLogger(__name__)

MAX_WINDOW_ID = 2**64 - 1


def _window_id(window: dict) -> int:
    wid = window.get("id")
    # bool is an int subclass; True is not a window id
    if not isinstance(wid, int) or isinstance(wid, bool) or not 0 <= wid <= MAX_WINDOW_ID:
        raise ProtocolError(f"Window has no valid id: {window!r}")
    return wid


def _optional_str(window: dict, key: str) -> Optional[str]:
    value = window.get(key)
    if value is not None and not isinstance(value, str):
        raise ProtocolError(f"Window {key} is not a string: {window!r}")
    return value


def get_window_entries(
    client: Optional[NiriClient] = None,
    icon_resolver: Callable[[str], str] = resolve_icon,
) -> List[Entry]:
    client = client or NiriClient()
    entries = []
    for window in client.windows():
        if not isinstance(window, dict):
            raise ProtocolError(f"Unexpected window record: {window!r}")
        wid = _window_id(window)

        title = _optional_str(window, "title")
        if not title:
            continue
        app_id = _optional_str(window, "app_id")
        if not app_id:
            continue

        entries.append(Entry(
            name=title,
            exec=str(wid),
            icon=icon_resolver(app_id) or app_id,
            open_type=OpenType.WINDOW,
        ))
    logger.debug(f"Found {len(entries)} windows")
    return entries

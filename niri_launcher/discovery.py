#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Everything the launcher can offer: cached applications, then open windows.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .cache import DesktopEntryCache
from .entry import Entry
from .errors import LauncherError, StorageError
from .ipc import NiriClient
from .windows import get_window_entries

logger = logging.getLogger(__name__)


class Aggregator:
    """
    Merges both entry sources. A failing source costs its own entries only;
    the failures of the last call are kept in `errors`.
    """

    def __init__(self, cache: Optional[DesktopEntryCache] = None, client: Optional[NiriClient] = None):
        self.cache = cache or DesktopEntryCache()
        self.client = client or NiriClient()
        self.errors: List[LauncherError] = []

    def get_entries(self) -> List[Entry]:
        self.errors = []
        entries: List[Entry] = []
        sources_ok = 0

        try:
            entries.extend(self.cache.get_desktop_entries())
            sources_ok += 1
        except (LauncherError, OSError) as e:
            logger.error(f"Desktop entries unavailable: {e}", exc_info=True)
            self.errors.append(e if isinstance(e, LauncherError) else StorageError(str(e)))

        try:
            entries.extend(get_window_entries(self.client))
            sources_ok += 1
        except LauncherError as e:
            logger.warning(f"Window list unavailable: {e}")
            self.errors.append(e)

        if not sources_ok:
            raise LauncherError(
                "No entry source available: " + "; ".join(str(e) for e in self.errors)
            )
        return entries


def get_entries() -> List[Entry]:
    return Aggregator().get_entries()

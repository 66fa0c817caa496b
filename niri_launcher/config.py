#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Runtime settings. Everything here can be overridden from the environment:

  NIRI_LAUNCHER_CACHE_DIR    where entries.cache and usage.dat live
  NIRI_LAUNCHER_TERMINAL     terminal command used for Terminal=true entries
  NIRI_LAUNCHER_IPC_TIMEOUT  seconds to wait on the niri socket
  NIRI_SOCKET                niri's IPC socket (exported by niri itself)
"""
from __future__ import annotations

import math
import os
import shlex
import logging
from typing import List, Optional

from gi.repository import GLib

logger = logging.getLogger(__name__)

APP_NAME = "niri-launcher"

CACHE_FILE_NAME = "entries.cache"
USAGE_FILE_NAME = "usage.dat"

DEFAULT_TERMINAL = ("ghostty", "-c")
DEFAULT_IPC_TIMEOUT = 2.0


def cache_dir() -> str:
    override = os.environ.get("NIRI_LAUNCHER_CACHE_DIR")
    if override:
        return override
    return os.path.join(GLib.get_user_cache_dir(), APP_NAME)


def cache_path() -> str:
    return os.path.join(cache_dir(), CACHE_FILE_NAME)


def usage_path() -> str:
    return os.path.join(cache_dir(), USAGE_FILE_NAME)


def terminal_command() -> List[str]:
    raw = os.environ.get("NIRI_LAUNCHER_TERMINAL", "").strip()
    if not raw:
        return list(DEFAULT_TERMINAL)
    try:
        cmd = shlex.split(raw)
    except ValueError as e:
        logger.warning(f"Ignoring malformed NIRI_LAUNCHER_TERMINAL '{raw}': {e}")
        return list(DEFAULT_TERMINAL)
    return cmd or list(DEFAULT_TERMINAL)


def ipc_timeout() -> float:
    raw = os.environ.get("NIRI_LAUNCHER_IPC_TIMEOUT")
    if not raw:
        return DEFAULT_IPC_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric NIRI_LAUNCHER_IPC_TIMEOUT '{raw}'")
        return DEFAULT_IPC_TIMEOUT
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_IPC_TIMEOUT
    return value


def niri_socket_path() -> Optional[str]:
    return os.environ.get("NIRI_SOCKET") or None

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
niri-launcher - application and window launcher backend for niri

This package provides desktop entry discovery with an on-disk cache,
icon resolution, usage-weighted fuzzy ranking and launching over niri IPC.
"""

__version__ = "0.3.0"

__all__ = [
    "cache",
    "desktop_entries",
    "discovery",
    "entry",
    "errors",
    "icons",
    "ipc",
    "launch",
    "ranking",
    "usage",
    "windows",
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Launchable entries: installed applications and open compositor windows.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass


class OpenType(enum.Enum):
    GRAPHICAL = "graphical"
    TERMINAL = "terminal"
    WINDOW = "window"


@dataclass(frozen=True)
class Entry:
    """
    One candidate shown to the user.

    `exec` is a command line for GRAPHICAL and TERMINAL entries and the
    stringified compositor window id for WINDOW entries.
    """
    name: str
    exec: str
    icon: str
    open_type: OpenType = OpenType.GRAPHICAL

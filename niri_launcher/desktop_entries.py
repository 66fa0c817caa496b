#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Reading .desktop files with GLib.KeyFile.

API
- read_desktop_file(path, locale=None) -> DesktopFile | None
- current_locale() -> str
"""
from __future__ import annotations

import os
import logging
from dataclasses import dataclass
from typing import Optional

from gi.repository import GLib

logger = logging.getLogger(__name__)

GROUP = "Desktop Entry"


@dataclass(frozen=True)
class DesktopFile:
    name: Optional[str]
    exec: str = ""
    icon: Optional[str] = None
    terminal: bool = False


def current_locale() -> str:
    return (
        os.environ.get("LC_ALL")
        or os.environ.get("LC_MESSAGES")
        or os.environ.get("LANG")
        or ""
    )


def _locale_probes(locale: str) -> list[str]:
    # sr_RS.UTF-8@latin → sr_RS@latin, sr_RS, sr@latin, sr
    if not locale or locale in ("C", "POSIX"):
        return []
    base, _, modifier = locale.partition("@")
    base = base.split(".", 1)[0]
    lang, _, country = base.partition("_")
    probes = []
    if country and modifier:
        probes.append(f"{lang}_{country}@{modifier}")
    if country:
        probes.append(f"{lang}_{country}")
    if modifier:
        probes.append(f"{lang}@{modifier}")
    probes.append(lang)
    return probes


def _parse_localized_name(kf: GLib.KeyFile, locale: str) -> Optional[str]:
    for p in _locale_probes(locale):
        key = f"Name[{p}]"
        if kf.has_key(GROUP, key):
            return kf.get_string(GROUP, key)
    if kf.has_key(GROUP, "Name"):
        return kf.get_string(GROUP, "Name")
    return None


def _optional_string(kf: GLib.KeyFile, key: str) -> Optional[str]:
    if kf.has_key(GROUP, key):
        return kf.get_string(GROUP, key)
    return None


def _terminal_flag(kf: GLib.KeyFile) -> bool:
    if not kf.has_key(GROUP, "Terminal"):
        return False
    try:
        return kf.get_boolean(GROUP, "Terminal")
    except GLib.Error:
        # Terminal=yes and friends are not valid booleans for GKeyFile
        return False


def read_desktop_file(path: str, locale: Optional[str] = None) -> Optional[DesktopFile]:
    """
    Parse one desktop file. Files GLib cannot load (binary junk,
    directories, unreadable) and files without a [Desktop Entry] group
    give None.
    """
    if locale is None:
        locale = current_locale()
    kf = GLib.KeyFile()
    try:
        kf.load_from_file(path, GLib.KeyFileFlags.NONE)
        if not kf.has_group(GROUP):
            return None
        return DesktopFile(
            name=_parse_localized_name(kf, locale),
            exec=_optional_string(kf, "Exec") or "",
            icon=_optional_string(kf, "Icon"),
            terminal=_terminal_flag(kf),
        )
    except GLib.Error as e:
        logger.debug(f"Failed to load desktop file '{path}': {e}")
        return None

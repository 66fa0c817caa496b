#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Icon name → file path, without GTK.

The lookup walks the usual icon theme layout on disk so that entries can
carry an absolute path the presentation layer loads directly. Anything we
cannot place is handed back unchanged and left to the toolkit's own theme
lookup.
"""
from __future__ import annotations

import os
from typing import Iterator, Optional, Sequence

ICON_FALLBACK = "application-x-executable"

PIXMAP_DIRS = (
    "/usr/share/pixmaps",
    "/usr/share/icons",
)

# hicolor first: every application installs into it.
ICON_THEMES = ("hicolor", "Adwaita", "gnome")

# Largest first
ICON_SIZES = (256, 128, 96, 64, 48, 32, 24, 16)

ICON_EXTENSIONS = (".png", ".svg", ".xpm")


def icon_base_dirs() -> tuple[str, ...]:
    home = os.path.expanduser("~")
    return (
        "/usr/share/icons",
        os.path.join(home, ".local", "share", "icons"),
        os.path.join(home, ".icons"),
    )


def _strip_extension(icon_name: str) -> str:
    # Same order as the extension list; only one suffix is removed.
    for ext in ICON_EXTENSIONS:
        if icon_name.endswith(ext):
            return icon_name[: -len(ext)]
    return icon_name


def _theme_candidates(base_dir: str, theme: str, icon_base: str) -> Iterator[str]:
    theme_dir = os.path.join(base_dir, theme)
    for size in ICON_SIZES:
        sub_dirs = (
            f"{size}x{size}/apps",
            f"{size}x{size}/places",
            f"{size}x{size}/mimetypes",
            "scalable/apps",
            "scalable/places",
        )
        for sub in sub_dirs:
            for ext in ICON_EXTENSIONS:
                yield os.path.join(theme_dir, sub, icon_base + ext)
    for ext in ICON_EXTENSIONS:
        yield os.path.join(theme_dir, icon_base + ext)


def find_in_pixmaps(icon_name: str, pixmap_dirs: Sequence[str] = PIXMAP_DIRS) -> Optional[str]:
    for d in pixmap_dirs:
        path = os.path.join(d, icon_name)
        if os.path.exists(path):
            return path
    return None


def find_in_icon_themes(
    icon_name: str,
    base_dirs: Optional[Sequence[str]] = None,
    themes: Sequence[str] = ICON_THEMES,
) -> Optional[str]:
    icon_base = _strip_extension(icon_name)
    if not icon_base:
        return None
    for base_dir in base_dirs if base_dirs is not None else icon_base_dirs():
        for theme in themes:
            for path in _theme_candidates(base_dir, theme, icon_base):
                if os.path.exists(path):
                    return path
    return None


def resolve_icon(
    icon_name: str,
    *,
    pixmap_dirs: Sequence[str] = PIXMAP_DIRS,
    base_dirs: Optional[Sequence[str]] = None,
    themes: Sequence[str] = ICON_THEMES,
) -> str:
    """
    Best-effort path for `icon_name`. Never raises.
    Order:
      1) existing absolute path, as is
      2) file name with an extension → pixmap directories
      3) themed lookup (base dir × theme × size × category × extension,
         then the theme root)
      4) the name itself, for the toolkit to try
    """
    if not icon_name:
        return ICON_FALLBACK

    lookup = icon_name
    if os.path.isabs(icon_name):
        if os.path.exists(icon_name):
            return icon_name
        # Stale path (uninstalled prefix, moved AppImage): try the file name.
        lookup = os.path.basename(icon_name)
        if not lookup:
            return icon_name

    if "." in lookup:
        hit = find_in_pixmaps(lookup, pixmap_dirs)
        if hit:
            return hit

    hit = find_in_icon_themes(lookup, base_dirs, themes)
    if hit:
        return hit

    return icon_name

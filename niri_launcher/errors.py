#!/usr/bin/env python3
# -*- coding: utf-8 -*-


class LauncherError(Exception):
    """Base class for every error raised by niri_launcher."""


class IPCConnectionError(LauncherError, ConnectionError):
    """The compositor socket could not be reached, or stalled."""


class ProtocolError(LauncherError):
    """The compositor replied with something we do not understand."""


class CompositorError(LauncherError):
    """The compositor understood the request and refused it."""


class EntryParseError(LauncherError):
    """A single desktop file could not be turned into an entry."""


class StorageError(LauncherError):
    """Cache or usage file unreadable, unwritable or corrupt."""


class WindowIdError(LauncherError, ValueError):
    """A window entry carries a window id that is not an unsigned 64-bit int."""


class DispatchError(LauncherError):
    """Launching or focusing an entry failed."""

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Desktop entry cache validated against application directory mtimes.

Parsing every .desktop file on every launcher start is the slow part of
discovery, so the parsed entries are persisted together with the
modification time of each application directory. Installing or removing an
application touches its directory, which invalidates the cache.

API
- app_directories() -> list[str]
- collect_directory_timestamps(dirs) -> dict[str, int]
- DesktopEntryCache(path=None, directories=None)
    .get_desktop_entries() -> list[Entry]   # never raises
    .load() / .save(data) / .is_valid(data) / .rebuild() / .refresh()
    .refresh_async() / .wait_until_ready(timeout=2.0)
"""
from __future__ import annotations

import os
import threading
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from . import config
from .desktop_entries import DesktopFile, read_desktop_file
from .entry import Entry, OpenType
from .errors import EntryParseError, StorageError
from .icons import ICON_FALLBACK, resolve_icon
from .storage import decode_variant, encode_variant, read_bytes, write_atomic

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1
# (version, [(name, exec, icon, open_type)], {directory: mtime_ns})
CACHE_VARIANT_TYPE = "(ua(ssss)a{sx})"


@dataclass
class CacheData:
    entries: List[Entry] = field(default_factory=list)
    directory_timestamps: Dict[str, int] = field(default_factory=dict)


def app_directories() -> List[str]:
    home = os.path.expanduser("~")
    return [
        "/usr/share/applications",
        os.path.join(home, ".local", "share", "applications"),
        "/var/lib/flatpak/exports/share/applications",
        os.path.join(home, ".local", "share", "flatpak", "exports", "share", "applications"),
    ]


def directory_mtime(path: str) -> int:
    return os.stat(path).st_mtime_ns


def collect_directory_timestamps(directories: Sequence[str]) -> Dict[str, int]:
    stamps = {}
    for d in directories:
        try:
            stamps[d] = directory_mtime(d)
        except OSError:
            continue
    return stamps


def encode_cache_data(data: CacheData) -> bytes:
    return encode_variant(
        CACHE_VARIANT_TYPE,
        (
            CACHE_FORMAT_VERSION,
            [(e.name, e.exec, e.icon, e.open_type.value) for e in data.entries],
            dict(data.directory_timestamps),
        ),
    )


def decode_cache_data(raw: bytes) -> CacheData:
    version, entries, stamps = decode_variant(CACHE_VARIANT_TYPE, raw)
    if version != CACHE_FORMAT_VERSION:
        raise StorageError(f"Unsupported cache format version {version}")
    try:
        decoded = [
            Entry(name=name, exec=execv, icon=icon, open_type=OpenType(kind))
            for name, execv, icon, kind in entries
        ]
    except ValueError as e:
        raise StorageError(f"Corrupt cache entry: {e}") from e
    return CacheData(entries=decoded, directory_timestamps=dict(stamps))


def entry_from_desktop_file(
    record: DesktopFile,
    icon_resolver: Callable[[str], str] = resolve_icon,
) -> Entry:
    if not record.name:
        raise EntryParseError("Missing or empty Name")
    icon = icon_resolver(record.icon or ICON_FALLBACK) or ICON_FALLBACK
    return Entry(
        name=record.name,
        exec=record.exec or "",
        icon=icon,
        open_type=OpenType.TERMINAL if record.terminal else OpenType.GRAPHICAL,
    )


def _list_files(directory: str) -> List[str]:
    try:
        with os.scandir(directory) as it:
            return [e.path for e in it if e.is_file()]
    except OSError as e:
        logger.debug(f"Application directory not readable: {directory} ({e})")
        return []


class DesktopEntryCache:
    """
    Owns the entry cache file. One instance per process; cheap to build.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        directories: Optional[Sequence[str]] = None,
        parser: Callable[[str], Optional[DesktopFile]] = read_desktop_file,
        icon_resolver: Callable[[str], str] = resolve_icon,
        max_workers: Optional[int] = None,
    ):
        self.path = path or config.cache_path()
        self.directories = list(directories) if directories is not None else app_directories()
        self.parser = parser
        self.icon_resolver = icon_resolver
        self.max_workers = max_workers or os.cpu_count() or 4
        self.warm = False
        self._ready = threading.Event()

    # -- persistence -----------------------------------------------------

    def load(self) -> CacheData:
        raw = read_bytes(self.path)
        if raw is None:
            return CacheData()
        return decode_cache_data(raw)

    def save(self, data: CacheData) -> None:
        write_atomic(self.path, encode_cache_data(data))

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove '{self.path}': {e}") from e
        self.warm = False

    # -- validation --------------------------------------------------------

    def is_valid(self, data: CacheData, directories: Optional[Sequence[str]] = None) -> bool:
        if not data.entries:
            # An empty cache written at first boot would otherwise stick forever.
            return False
        for d in directories if directories is not None else self.directories:
            if not os.path.isdir(d):
                continue
            try:
                current = directory_mtime(d)
            except OSError:
                return False
            if data.directory_timestamps.get(d) != current:
                return False
        return True

    # -- rebuild -----------------------------------------------------------

    def _parse_file(self, path: str) -> Entry:
        record = self.parser(path)
        if record is None:
            raise EntryParseError(f"Not a desktop entry: {path}")
        return entry_from_desktop_file(record, self.icon_resolver)

    def rebuild(self, directories: Optional[Sequence[str]] = None) -> List[Entry]:
        """Parse every file in the application directories, in parallel."""
        dirs = list(directories) if directories is not None else self.directories
        per_dir: List[List[Entry]] = [[] for _ in dirs]
        failed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {}
            for index, d in enumerate(dirs):
                for path in _list_files(d):
                    futures[executor.submit(self._parse_file, path)] = (index, path)

            for future in as_completed(futures):
                index, path = futures[future]
                try:
                    per_dir[index].append(future.result())
                except EntryParseError as e:
                    failed += 1
                    logger.debug(f"Skipping '{path}': {e}")
                except Exception as e:
                    failed += 1
                    logger.debug(f"Failed to process desktop file '{path}': {e}")

        entries = [e for chunk in per_dir for e in chunk]
        logger.info(f"Parsed {len(entries)} desktop entries ({failed} skipped)")
        return entries

    def refresh(self) -> List[Entry]:
        """Rebuild unconditionally and persist. Save failures only log."""
        # Stamp before listing: a change made during the scan must invalidate.
        stamps = collect_directory_timestamps(self.directories)
        entries = self.rebuild(self.directories)
        try:
            self.save(CacheData(entries=entries, directory_timestamps=stamps))
            self.warm = True
        except StorageError as e:
            logger.warning(f"Failed to save entry cache: {e}")
        return entries

    def get_desktop_entries(self) -> List[Entry]:
        try:
            data = self.load()
        except StorageError as e:
            logger.warning(f"Ignoring unusable entry cache: {e}")
            data = CacheData()

        if self.is_valid(data):
            self.warm = True
            return list(data.entries)

        self.warm = False
        logger.debug("Entry cache is stale or missing, rebuilding")
        return self.refresh()

    # -- background refresh ----------------------------------------------

    def refresh_async(self) -> None:
        self._ready.clear()

        def work():
            try:
                self.refresh()
            except Exception as e:
                logger.error(f"Error during desktop entry refresh: {e}", exc_info=True)
            finally:
                self._ready.set()

        threading.Thread(target=work, daemon=True).start()

    def wait_until_ready(self, timeout: float = 2.0) -> bool:
        return self._ready.wait(timeout)

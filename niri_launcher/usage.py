#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Launch history and the usage boost derived from it.

The boost blends how recently an application was launched (70%) with how
often (30%) into a value in [0, 1]. Keys are display names.
"""
from __future__ import annotations

import math
import time
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from . import config
from .errors import StorageError
from .storage import decode_variant, encode_variant, read_bytes, write_atomic

logger = logging.getLogger(__name__)

USAGE_FORMAT_VERSION = 1
# (version, {name: (last_used, use_count)})
USAGE_VARIANT_TYPE = "(ua{s(tu)})"

MAX_USE_COUNT = 2**32 - 1

HOUR = 3600
DAY = 86400
WEEK = 604800
MONTH = 2592000

RECENCY_WEIGHT = 0.7
FREQUENCY_WEIGHT = 0.3


def current_timestamp() -> int:
    return int(time.time())


@dataclass
class UsageStats:
    last_used: int
    use_count: int = 1


def recency_score(age: float) -> float:
    if age < HOUR:
        return 1.0
    if age < DAY:
        return 0.8 + 0.2 * (1.0 - age / DAY)
    if age < WEEK:
        return 0.5 + 0.3 * (1.0 - age / WEEK)
    if age < MONTH:
        return 0.2 + 0.3 * (1.0 - age / MONTH)
    return 0.1


def frequency_score(use_count: int) -> float:
    if use_count < 1:
        return 0.0
    return min(1.0, math.log(use_count) / 10.0)


class UsageTracker:
    def __init__(self, path: Optional[str] = None, stats: Optional[Dict[str, UsageStats]] = None):
        self.path = path or config.usage_path()
        self.stats: Dict[str, UsageStats] = stats if stats is not None else {}

    @classmethod
    def load(cls, path: Optional[str] = None) -> "UsageTracker":
        """
        Read the usage file. A missing or undecodable file gives an empty
        tracker; only unexpected I/O errors raise StorageError.
        """
        tracker = cls(path)
        raw = read_bytes(tracker.path)
        if raw is None:
            return tracker
        try:
            version, records = decode_variant(USAGE_VARIANT_TYPE, raw)
            if version != USAGE_FORMAT_VERSION:
                raise StorageError(f"Unsupported usage format version {version}")
        except StorageError as e:
            logger.warning(f"Discarding unreadable usage data '{tracker.path}': {e}")
            return tracker
        tracker.stats = {
            name: UsageStats(last_used=last_used, use_count=count)
            for name, (last_used, count) in records.items()
            if count >= 1
        }
        return tracker

    def save(self) -> None:
        records = {
            name: (s.last_used, s.use_count) for name, s in self.stats.items()
        }
        write_atomic(self.path, encode_variant(USAGE_VARIANT_TYPE, (USAGE_FORMAT_VERSION, records)))

    def record_launch(self, name: str, now: Optional[int] = None) -> UsageStats:
        now = current_timestamp() if now is None else now
        stats = self.stats.get(name)
        if stats is None:
            stats = self.stats[name] = UsageStats(last_used=now, use_count=1)
        else:
            stats.last_used = now
            stats.use_count = min(stats.use_count + 1, MAX_USE_COUNT)
        return stats

    def get_stats(self, name: str) -> Optional[UsageStats]:
        return self.stats.get(name)

    def calculate_boost(self, name: str, now: Optional[int] = None) -> float:
        stats = self.stats.get(name)
        if stats is None:
            return 0.0
        now = current_timestamp() if now is None else now
        age = max(0, now - stats.last_used)
        boost = (
            RECENCY_WEIGHT * recency_score(age)
            + FREQUENCY_WEIGHT * frequency_score(stats.use_count)
        )
        return min(1.0, max(0.0, boost))

    def __len__(self) -> int:
        return len(self.stats)

    def __contains__(self, name: str) -> bool:
        return name in self.stats

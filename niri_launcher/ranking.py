#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ordering entries for a query.

With an empty query entries are ordered by usage boost alone. Otherwise each
name is scored with a skim/fzf style subsequence matcher; names that do not
contain the query as a (case-insensitive) subsequence are dropped, and the
usage boost amplifies the fuzzy score by up to 50%.
"""
from __future__ import annotations

from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

from .entry import Entry
from .usage import UsageTracker, current_timestamp

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

USAGE_WEIGHT = 0.5

_LOWER, _UPPER, _NUMBER, _NON_WORD = range(4)


def _char_class(c: str) -> int:
    if c.islower():
        return _LOWER
    if c.isupper():
        return _UPPER
    if c.isdigit():
        return _NUMBER
    if c.isalpha():
        # caseless scripts
        return _LOWER
    return _NON_WORD


def _bonus(prev: int, cur: int) -> int:
    if prev == _NON_WORD and cur != _NON_WORD:
        return BONUS_BOUNDARY
    if (prev == _LOWER and cur == _UPPER) or (prev != _NUMBER and cur == _NUMBER):
        return BONUS_CAMEL
    if cur == _NON_WORD:
        return BONUS_NON_WORD
    return 0


def _is_subsequence(text: List[str], pattern: List[str]) -> bool:
    i = 0
    for c in text:
        if i < len(pattern) and c == pattern[i]:
            i += 1
    return i == len(pattern)


def fuzzy_match(choice: str, pattern: str) -> Optional[int]:
    """
    Score `pattern` against `choice`, or None when it is not a subsequence.

    Every matched character scores SCORE_MATCH plus a position bonus (word
    start, camelCase hump, punctuation); the bonus of the first pattern
    character counts double and consecutive matches get at least
    BONUS_CONSECUTIVE. Gaps between matches cost SCORE_GAP_START for the
    first skipped character and SCORE_GAP_EXTENSION for each further one.
    The best alignment is found by dynamic programming over
    pattern × choice.
    """
    if not pattern:
        return 0
    text = [c.lower() for c in choice]
    pat = [c.lower() for c in pattern]
    if not _is_subsequence(text, pat):
        return None

    n = len(text)
    bonus = []
    prev_class = _NON_WORD
    for c in choice:
        cur = _char_class(c)
        bonus.append(_bonus(prev_class, cur))
        prev_class = cur

    # row[j]: best score with the current pattern char matched at text[j]
    row: List[Optional[int]] = [
        SCORE_MATCH + bonus[j] * BONUS_FIRST_CHAR_MULTIPLIER if text[j] == pat[0] else None
        for j in range(n)
    ]

    for pc in pat[1:]:
        prev_row = row
        row = [None] * n
        gap_best: Optional[int] = None
        for j in range(n):
            # best previous match at k <= j - 2, charged for the gap up to j
            if gap_best is not None:
                gap_best += SCORE_GAP_EXTENSION
            if j >= 2 and prev_row[j - 2] is not None:
                opened = prev_row[j - 2] + SCORE_GAP_START
                if gap_best is None or opened > gap_best:
                    gap_best = opened

            if text[j] != pc:
                continue
            best = None
            if j >= 1 and prev_row[j - 1] is not None:
                best = prev_row[j - 1] + SCORE_MATCH + max(bonus[j], BONUS_CONSECUTIVE)
            if gap_best is not None:
                gapped = gap_best + SCORE_MATCH + bonus[j]
                if best is None or gapped > best:
                    best = gapped
            row[j] = best

    scores = [s for s in row if s is not None]
    if not scores:
        return None
    # Long gaps can push a match below zero; keep it positive for the boost multiplier.
    return max(1, max(scores))


def _descending(a: Tuple[float, Entry], b: Tuple[float, Entry]) -> int:
    # NaN compares neither way and so keeps its input position
    if a[0] > b[0]:
        return -1
    if a[0] < b[0]:
        return 1
    return 0


def rank(
    candidates: Sequence[Entry],
    query: str,
    tracker: UsageTracker,
    *,
    now: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Entry]:
    now = current_timestamp() if now is None else now

    scored: List[Tuple[float, Entry]] = []
    if not query:
        scored = [(tracker.calculate_boost(e.name, now), e) for e in candidates]
    else:
        for e in candidates:
            score = fuzzy_match(e.name, query)
            if score is None:
                continue
            boost = tracker.calculate_boost(e.name, now)
            scored.append((score * (1.0 + boost * USAGE_WEIGHT), e))

    scored.sort(key=cmp_to_key(_descending))
    ranked = [e for _, e in scored]
    if limit is not None:
        ranked = ranked[:limit]
    return ranked

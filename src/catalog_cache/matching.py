# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Match items to feed rows by normalised name."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from .feeds import FeedEntry

RIGHT_SINGLE_QUOTE: Final[str] = "’"
ASCII_APOSTROPHE: Final[str] = "'"


def normalize_name(value: str) -> str:
    """Lowercase ``value`` and replace typographic apostrophes with ASCII ones."""

    return value.lower().replace(RIGHT_SINGLE_QUOTE, ASCII_APOSTROPHE)


def find_feed_entry(entries: Iterable[FeedEntry] | None, name: str) -> FeedEntry | None:
    """Return the first feed entry whose name cell matches ``name``.

    Duplicate names in the feed are not an error; the earliest row wins.

    Args:
        entries: Feed rows in feed order, ``None`` when the feed is unavailable.
        name: Item name (display name when present) to look up.

    Returns:
        FeedEntry | None: Matching row, or ``None`` when nothing matches.
    """

    if entries is None:
        return None
    wanted = normalize_name(name)
    return next((entry for entry in entries if normalize_name(entry.name) == wanted), None)


__all__ = ["find_feed_entry", "normalize_name"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand ignore-list macros against the complete item set."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Final

from .models import ItemRecord

MACRO_PREFIX: Final[str] = "+"
REMOVAL_PREFIX: Final[str] = "-"
IGNORE_PROCESSED_KEY: Final[str] = "IgnoreProcessed"

IGNORE_MACROS: Final[Mapping[str, Callable[[ItemRecord], bool]]] = {
    "+SolvesAtEnd": lambda record: record.solves_at_end,
    "+NeedsOtherSolves": lambda record: record.needs_other_solves,
    "+SolvesBeforeSome": lambda record: record.solves_before_some,
    "+PseudoNeedy": lambda record: record.is_pseudo_needy,
    "+TimeSensitive": lambda record: record.is_time_sensitive,
}


def needs_expansion(directives: Sequence[str] | None) -> bool:
    """Return ``True`` when ``directives`` contain at least one ``+`` macro."""

    return bool(directives) and any(directive.startswith(MACRO_PREFIX) for directive in directives or ())


def expand_ignore_list(directives: Sequence[str], items: Sequence[ItemRecord]) -> list[str]:
    """Apply ignore directives in order and return the resulting list.

    * A known ``+`` macro appends the display name of every item whose flag is set.
    * ``-Name`` removes the first ``Name`` collected so far, if any.
    * Any other entry without a ``+`` prefix is appended as is.
    * Unknown ``+`` macros are dropped.

    Args:
        directives: Raw ignore directives of one item.
        items: Every loaded item, in iteration order.

    Returns:
        list[str]: Expanded ignore list.
    """

    expanded: list[str] = []
    for directive in directives:
        predicate = IGNORE_MACROS.get(directive)
        if predicate is not None:
            expanded.extend(item.effective_name for item in items if predicate(item))
        elif directive.startswith(REMOVAL_PREFIX):
            target = directive[len(REMOVAL_PREFIX) :]
            if target in expanded:
                expanded.remove(target)
        elif not directive.startswith(MACRO_PREFIX):
            expanded.append(directive)
    return expanded


__all__ = [
    "IGNORE_MACROS",
    "IGNORE_PROCESSED_KEY",
    "expand_ignore_list",
    "needs_expansion",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fold Twitch Plays and Time-Mode feed rows into item records.

TP scores arrive as compact formulas such as ``"10 + T 0.5 + D 2"``. Each
``+``-separated factor is either a flat number of base points or a tagged rate
that is converted to points using a reference bomb: 10 modules, 20 minutes,
65 seconds between needy activations and 10 player actions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final

from .feeds import FeedEntry
from .models import ManifestEntry, TimeModeInfo, TimeModeOrigin, json_number

REFERENCE_MODULES: Final[int] = 10
REFERENCE_MINUTES: Final[int] = 20
REFERENCE_NEEDY_INTERVAL: Final[int] = 65
REFERENCE_ACTIONS: Final[int] = 10

SECONDS_PER_BOMB: Final[int] = REFERENCE_MINUTES * 60
# Whole deactivations only: the count is truncated before it is multiplied.
DEACTIVATIONS_PER_BOMB: Final[int] = SECONDS_PER_BOMB // REFERENCE_NEEDY_INTERVAL

DEFAULT_TIME_MODE_SCORE: Final[str] = "10"
TBD_MARKER: Final[str] = "TBD"
TWITCH_PLAYS_KEY: Final[str] = "TwitchPlays"
TIME_MODE_KEY: Final[str] = "TimeMode"

_PROVISIONAL_MARKERS: Final[re.Pattern[str]] = re.compile(r"UN|(?<=\d)T")
_DECIMAL_LITERAL: Final[re.Pattern[str]] = re.compile(r"\s*[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)\s*")
GROUP_SEPARATOR: Final[str] = ","

# tag -> (points per unit, unit description)
_RATE_TAGS: Final[dict[str, tuple[int, str]]] = {
    "T": (SECONDS_PER_BOMB, "per second"),
    "D": (DEACTIVATIONS_PER_BOMB, "per deactivation"),
    "PPA": (REFERENCE_ACTIONS, "per action"),
    "S": (REFERENCE_MODULES, "per module"),
}


@dataclass(frozen=True, slots=True)
class TPScore:
    """Total points for the reference bomb and a readable breakdown."""

    score: Decimal
    description: str


def parse_decimal(text: str) -> Decimal | None:
    """Return ``text`` as a :class:`Decimal`, or ``None`` if it is not a plain decimal literal.

    Commas are accepted as digit-group separators in the integer part
    (``"1,000"`` is 1000); exponents are rejected.
    """

    if not _DECIMAL_LITERAL.fullmatch(text):
        return None
    try:
        return Decimal(text.strip().replace(GROUP_SEPARATOR, ""))
    except InvalidOperation:  # pragma: no cover - guarded by the literal pattern
        return None


def pluralize(number: Decimal, noun: str) -> str:
    """Return ``"<number> <noun>"`` with the noun pluralised unless the number is exactly 1."""

    return f"{number} {noun}" if number == 1 else f"{number} {noun}s"


def parse_tp_score(formula: str) -> TPScore:
    """Evaluate a TP score formula.

    Args:
        formula: Raw formula text from the TP feed.

    Returns:
        TPScore: Summed score and the ``" + "``-joined description fragments.
    """

    cleaned = _PROVISIONAL_MARKERS.sub("", formula)
    score = Decimal(0)
    parts: list[str] = []
    for factor in cleaned.split("+"):
        if not factor or factor.strip() == TBD_MARKER:
            continue
        tokens = factor.split()
        if not 1 <= len(tokens) <= 2:
            continue
        magnitude = tokens[-1]
        if magnitude.endswith("x"):
            magnitude = magnitude[:-1]
        number = parse_decimal(magnitude)
        if number is None:
            continue

        if len(tokens) == 1:
            parts.append(pluralize(number, "base point"))
            score += number
            continue
        rate = _RATE_TAGS.get(tokens[0])
        if rate is None:
            continue
        multiplier, unit = rate
        parts.append(f"{pluralize(number, 'point')} {unit}")
        score += multiplier * number

    return TPScore(score=score, description=" + ".join(parts))


def merge_tp_score(entry: ManifestEntry, formula: str) -> TPScore:
    """Store the evaluated TP ``formula`` on ``entry``'s record and document.

    Existing keys of the document's ``TwitchPlays`` object are kept; ``Score``
    and ``ScoreStringDescription`` are overwritten.

    Args:
        entry: Item to enrich.
        formula: Raw TP score formula from the matched feed row.

    Returns:
        TPScore: The evaluated score.
    """

    result = parse_tp_score(formula)
    entry.record.twitch_plays_score = result.score
    entry.record.twitch_plays_description = result.description
    existing = entry.document.get(TWITCH_PLAYS_KEY)
    twitch_plays = dict(existing) if isinstance(existing, dict) else {}
    twitch_plays["Score"] = json_number(result.score)
    twitch_plays["ScoreStringDescription"] = result.description
    entry.document[TWITCH_PLAYS_KEY] = twitch_plays
    return result


def resolve_time_mode_origin(row: FeedEntry) -> TimeModeOrigin:
    """Return the Time-Mode origin implied by ``row``.

    Priority: an assigned score, then a community score, then a TP score.
    """

    if row.cell("assignedscore"):
        return TimeModeOrigin.ASSIGNED
    if row.cell("communityscore"):
        return TimeModeOrigin.COMMUNITY
    if row.cell("tpscore").strip():
        return TimeModeOrigin.TWITCH_PLAYS
    return TimeModeOrigin.UNASSIGNED


def merge_time_mode(entry: ManifestEntry, row: FeedEntry) -> TimeModeInfo:
    """Fold a Time-Mode feed row into ``entry``.

    The origin is recomputed on every call. ``score`` and ``score_per_module``
    are only set while they are still ``None``, so values from the manifest or
    an earlier merge are never replaced. A blank resolved score counts as 10.

    Args:
        entry: Item to enrich.
        row: Matched Time-Mode feed row.

    Returns:
        TimeModeInfo: The item's Time-Mode sub-record after the merge.
    """

    score_text = row.cell("resolvedscore").strip() or DEFAULT_TIME_MODE_SCORE
    per_module_text = row.cell("resolvedbosspointspermodule")

    record = entry.record
    if record.time_mode is None:
        record.time_mode = TimeModeInfo()
    time_mode = record.time_mode
    time_mode.origin = resolve_time_mode_origin(row)

    score = parse_decimal(score_text)
    if score is not None and time_mode.score is None:
        time_mode.score = score
    per_module = parse_decimal(per_module_text)
    if per_module is not None and time_mode.score_per_module is None:
        time_mode.score_per_module = per_module

    entry.document[TIME_MODE_KEY] = time_mode.to_json()
    return time_mode


__all__ = [
    "DEACTIVATIONS_PER_BOMB",
    "TPScore",
    "merge_time_mode",
    "merge_tp_score",
    "parse_decimal",
    "parse_tp_score",
    "pluralize",
    "resolve_time_mode_origin",
]

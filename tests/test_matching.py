# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for feed-row name matching."""

from __future__ import annotations

from conftest import feed_entries

from catalog_cache.matching import find_feed_entry, normalize_name


def test_normalize_name_folds_case_and_apostrophes() -> None:
    assert normalize_name("Don’t Pet The CAT") == "don't pet the cat"


def test_typographic_apostrophe_matches_ascii() -> None:
    entries = feed_entries([{"modulename": "Wires"}, {"modulename": "don't pet the cat", "tpscore": "4"}])
    match = find_feed_entry(entries, "Don’t Pet the Cat")
    assert match is not None
    assert match.cell("tpscore") == "4"


def test_first_matching_row_wins() -> None:
    entries = feed_entries(
        [
            {"modulename": "Morse Code", "tpscore": "5"},
            {"modulename": "MORSE CODE", "tpscore": "9"},
        ],
    )
    match = find_feed_entry(entries, "Morse Code")
    assert match is not None
    assert match.cell("tpscore") == "5"


def test_missing_or_unavailable_feed_yields_none() -> None:
    assert find_feed_entry(feed_entries([{"modulename": "Wires"}]), "Maze") is None
    assert find_feed_entry(None, "Wires") is None
    assert find_feed_entry([], "Wires") is None

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for manual document discovery."""

from __future__ import annotations

from pathlib import Path

from catalog_cache.config import CacheSettings
from catalog_cache.sheets import enumerate_sheet_urls, related_item_names


def _touch(root: Path, *relative: str) -> None:
    for name in relative:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")


def test_related_names_are_strict_prefix_extensions() -> None:
    names = ["Colour Flash", "Colour Flash Translated", "Colour", "Maze"]
    assert related_item_names("Colour Flash", names) == ["Colour Flash Translated"]
    assert related_item_names("Colour", names) == ["Colour Flash", "Colour Flash Translated"]
    assert related_item_names("Maze", names) == []


def test_related_names_never_include_the_item_itself() -> None:
    names = ["Maze", "Maze", "Mazes"]
    related = related_item_names("Maze", names)
    assert "Maze" not in related
    assert all(len(other) > len("Maze") and other.startswith("Maze") for other in related)


def test_documents_are_collected_per_directory(catalog_root: Path, settings: CacheSettings) -> None:
    _touch(
        catalog_root,
        "HTML/Maze.html",
        "HTML/Maze (optimized by Someone).html",
        "HTML/Mazes.html",
        "PDF/Maze.pdf",
        "HTML/Other.html",
    )
    urls = enumerate_sheet_urls("Maze", [], settings)
    assert urls == [
        "HTML/Maze%20%28optimized%20by%20Someone%29.html",
        "HTML/Maze.html",
        "PDF/Maze.pdf",
    ]


def test_documents_of_related_items_are_excluded(catalog_root: Path, settings: CacheSettings) -> None:
    _touch(catalog_root, "HTML/Simon.html", "HTML/Simon (Extended).html")
    urls = enumerate_sheet_urls("Simon", ["Simon (Extended)"], settings)
    assert urls == ["HTML/Simon.html"]


def test_missing_document_directories_are_skipped(catalog_root: Path, settings: CacheSettings) -> None:
    (catalog_root / "PDF").rmdir()
    _touch(catalog_root, "HTML/Maze.html")
    assert enumerate_sheet_urls("Maze", [], settings) == ["HTML/Maze.html"]

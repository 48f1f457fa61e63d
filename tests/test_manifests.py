# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for manifest loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from catalog_cache.errors import ManifestError, RebuildError
from catalog_cache.manifests import ManifestLoader, format_author, load_manifest


def test_malformed_files_are_isolated(catalog_root: Path, write_manifest) -> None:
    for index in range(8):
        write_manifest(f"Item {index}")
    manifest_dir = catalog_root / "JSON"
    (manifest_dir / "Broken.json").write_text("{not json", encoding="utf-8")
    (manifest_dir / "Nameless.json").write_text('{"ModuleID": "nameless"}', encoding="utf-8")

    result = ManifestLoader(manifest_dir, workers=4).load()

    assert len(result.entries) == 8
    assert len(result.errors) == 2
    assert any(message.startswith("Broken.json error: invalid JSON") for message in result.errors)
    assert any(message.startswith("Nameless.json error: Name") for message in result.errors)


def test_entries_are_sorted_case_insensitively(catalog_root: Path, write_manifest) -> None:
    write_manifest("bravo")
    write_manifest("Charlie")
    write_manifest("alpha")

    result = ManifestLoader(catalog_root / "JSON", workers=2).load()

    assert [entry.file_name for entry in result.entries] == ["alpha", "bravo", "Charlie"]


def test_file_name_is_recorded_when_it_differs_from_name(catalog_root: Path, write_manifest) -> None:
    path = write_manifest("Dont Pet the Cat", name="Don't Pet the Cat")
    entry = load_manifest(path)
    assert entry.file_name == "Dont Pet the Cat"
    assert entry.document["FileName"] == "Dont Pet the Cat"

    same = load_manifest(write_manifest("Wires"))
    assert "FileName" not in same.document


def test_author_is_derived_from_contributors(write_manifest) -> None:
    path = write_manifest(
        "Maze",
        Contributors={"Developer": ["Ana", "Ben"], "Manual": ["Ben", " Cy "], "Maintainer": []},
    )
    entry = load_manifest(path)
    assert entry.record.author == "Ana, Ben, Cy"
    assert entry.document["Author"] == "Ana, Ben, Cy"


def test_explicit_author_is_kept(write_manifest) -> None:
    entry = load_manifest(write_manifest("Maze", Author="Original", Contributors={"Developer": ["Ana"]}))
    assert entry.record.author == "Original"


def test_byte_order_mark_is_accepted(catalog_root: Path) -> None:
    path = catalog_root / "JSON" / "Bom.json"
    path.write_bytes(b"\xef\xbb\xbf" + b'{"ModuleID": "bom", "Name": "Bom"}')
    assert load_manifest(path).record.module_id == "bom"


def test_non_object_documents_are_rejected(catalog_root: Path) -> None:
    path = catalog_root / "JSON" / "List.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ManifestError, match="JSON object") as info:
        load_manifest(path)
    assert info.value.path == path


def test_format_author_dedupes_in_role_order() -> None:
    assert format_author({"A": ["x", "y"], "B": ["y", "z"]}) == "x, y, z"
    assert format_author({}) == ""


def test_missing_directory_aborts(tmp_path: Path) -> None:
    with pytest.raises(RebuildError):
        ManifestLoader(tmp_path / "absent").load()


def test_empty_display_name_is_not_replaced_by_name(write_manifest) -> None:
    blank = load_manifest(write_manifest("Wires", DisplayName=""))
    assert blank.record.effective_name == ""
    absent = load_manifest(write_manifest("Maze"))
    assert absent.record.effective_name == "Maze"

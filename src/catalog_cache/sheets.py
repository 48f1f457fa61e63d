# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the manual documents belonging to an item."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final
from urllib.parse import quote

from .config import CacheSettings

VARIANT_SEPARATOR: Final[str] = " ("


def related_item_names(name: str, names: Iterable[str]) -> list[str]:
    """Return every name that extends ``name`` and is strictly longer.

    ``"Colour Flash"`` relates to ``"Colour Flash Translated"``; a name never
    relates to itself.

    Args:
        name: Canonical name of the item.
        names: Canonical names of every loaded item.

    Returns:
        list[str]: Related names in iteration order.
    """

    return [other for other in names if len(other) > len(name) and other.startswith(name)]


def _belongs_to(stem: str, file_name: str) -> bool:
    return stem == file_name or stem.startswith(file_name + VARIANT_SEPARATOR)


def enumerate_sheet_urls(file_name: str, related: Sequence[str], settings: CacheSettings) -> list[str]:
    """Return the document URLs for ``file_name`` across every document directory.

    A document belongs to the item when its stem equals ``file_name`` or adds a
    parenthesised variant (``"Name (translated by X)"``). Documents that belong
    to a related, longer-named item are left to that item.

    Args:
        file_name: Slug of the item.
        related: Names produced by :func:`related_item_names`.
        settings: Settings naming the document directories.

    Returns:
        list[str]: URL paths such as ``"HTML/Name.html"``, grouped by directory.
    """

    urls: list[str] = []
    for document_dir in settings.document_dirs:
        directory = settings.document_path(document_dir)
        if not directory.is_dir():
            continue
        documents = sorted(path for path in directory.iterdir() if path.is_file())
        for path in documents:
            if not _belongs_to(path.stem, file_name):
                continue
            if any(_belongs_to(path.stem, other) for other in related):
                continue
            urls.append(_document_url(document_dir, path))
    return urls


def _document_url(document_dir: str, path: Path) -> str:
    return f"{quote(document_dir)}/{quote(path.name)}"


__all__ = ["enumerate_sheet_urls", "related_item_names"]

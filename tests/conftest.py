# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import httpx
import pytest
from PIL import Image

from catalog_cache.config import CacheSettings
from catalog_cache.feeds import FeedEntry

TP_FEED_URL = "https://feeds.test/tp"
TIME_MODE_FEED_URL = "https://feeds.test/time-mode"

ManifestWriter = Callable[..., Path]
IconWriter = Callable[..., Path]


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Return a base directory with empty manifest, icon and document directories."""

    root = tmp_path / "site"
    for name in ("JSON", "Icons", "HTML", "PDF"):
        (root / name).mkdir(parents=True)
    return root


@pytest.fixture
def settings(catalog_root: Path) -> CacheSettings:
    """Return settings pointing at ``catalog_root`` with fake feed URLs."""

    return CacheSettings(
        base_dir=catalog_root,
        tp_feed_url=TP_FEED_URL,
        time_mode_feed_url=TIME_MODE_FEED_URL,
        workers=2,
        displays=("name", "author"),
        filters=({"id": "defdiff", "type": "slider"},),
        selectables=({"id": "manual"},),
    )


@pytest.fixture
def write_manifest(catalog_root: Path) -> ManifestWriter:
    """Return a helper writing a manifest document into ``JSON/``."""

    def _write(file_name: str, *, module_id: str | None = None, name: str | None = None, **fields: Any) -> Path:
        document: dict[str, Any] = {
            "ModuleID": module_id or file_name.replace(" ", ""),
            "Name": name or file_name,
        }
        document.update(fields)
        path = catalog_root / "JSON" / f"{file_name}.json"
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_icon(catalog_root: Path) -> IconWriter:
    """Return a helper writing a solid-colour PNG icon into ``Icons/``."""

    def _write(
        name: str,
        colour: tuple[int, int, int, int] = (255, 0, 0, 255),
        size: tuple[int, int] = (32, 32),
    ) -> Path:
        path = catalog_root / "Icons" / f"{name}.png"
        with Image.new("RGBA", size, colour) as image:
            image.save(path, format="PNG")
        return path

    return _write


def feed_document(rows: Sequence[Mapping[str, str]]) -> dict[str, Any]:
    """Return a list-feed document whose rows carry the given column texts."""

    return {"feed": {"entry": [{f"gsx${column}": {"$t": text} for column, text in row.items()} for row in rows]}}


def feed_entries(rows: Sequence[Mapping[str, str]]) -> list[FeedEntry]:
    """Return feed entries built directly from column texts."""

    return [FeedEntry(cells=dict(row)) for row in rows]


def feed_transport(documents: Mapping[str, Any]) -> httpx.MockTransport:
    """Return a transport serving ``documents`` keyed by URL; other URLs answer 404."""

    def _handler(request: httpx.Request) -> httpx.Response:
        document = documents.get(str(request.url))
        if document is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, json=document)

    return httpx.MockTransport(_handler)

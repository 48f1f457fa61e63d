# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for icon sprite packing."""

from __future__ import annotations

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from catalog_cache.errors import SpriteError
from catalog_cache.sprite import (
    BLANK_COORDINATES,
    COLUMNS,
    CSS_SELECTOR,
    lookup_coordinates,
    pack_icon_sprite,
    sprite_css,
)


def _decode(png: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(png))
    image.load()
    return image


def test_blank_icon_is_packed_first(catalog_root: Path, write_icon) -> None:
    write_icon("Alpha", (0, 255, 0, 255))
    write_icon("blank", (0, 0, 0, 0))
    write_icon("Bravo", (0, 0, 255, 255))

    sprite = pack_icon_sprite(catalog_root / "Icons")

    assert sprite.coordinates == {"blank": (0, 0), "Alpha": (1, 0), "Bravo": (2, 0)}
    with _decode(sprite.png) as image:
        assert image.size == (32 * COLUMNS, 32)
        assert image.getpixel((32 + 5, 5)) == (0, 255, 0, 255)
        assert image.getpixel((64 + 5, 5)) == (0, 0, 255, 255)


def test_icons_wrap_onto_additional_rows(catalog_root: Path, write_icon) -> None:
    for index in range(COLUMNS + 1):
        write_icon(f"icon{index:03d}")

    sprite = pack_icon_sprite(catalog_root / "Icons")

    assert sprite.coordinates["icon039"] == (COLUMNS - 1, 0)
    assert sprite.coordinates["icon040"] == (0, 1)
    with _decode(sprite.png) as image:
        assert image.size == (32 * COLUMNS, 64)


def test_empty_directory_yields_single_row(catalog_root: Path) -> None:
    sprite = pack_icon_sprite(catalog_root / "Icons")
    assert sprite.coordinates == {}
    with _decode(sprite.png) as image:
        assert image.size == (32 * COLUMNS, 32)


def test_css_embeds_png_as_data_uri(catalog_root: Path, write_icon) -> None:
    write_icon("blank")
    sprite = pack_icon_sprite(catalog_root / "Icons")
    prefix = f"{CSS_SELECTOR}{{background-image:url(data:image/png;base64,"
    assert sprite.css.startswith(prefix)
    assert sprite.css.endswith(")}")
    encoded = sprite.css[len(prefix) : -2]
    assert base64.b64decode(encoded) == sprite.png
    assert sprite_css(sprite.png) == sprite.css


def test_oversized_icons_are_scaled_to_the_cell(catalog_root: Path, write_icon) -> None:
    write_icon("Large", (10, 20, 30, 255), size=(64, 64))
    sprite = pack_icon_sprite(catalog_root / "Icons")
    assert sprite.coordinates["Large"] == (0, 0)
    with _decode(sprite.png) as image:
        assert image.getpixel((16, 16)) == (10, 20, 30, 255)
        assert image.getpixel((40, 16))[3] == 0


def test_missing_names_fall_back_to_blank_cell(catalog_root: Path, write_icon) -> None:
    write_icon("blank")
    write_icon("Alpha")
    sprite = pack_icon_sprite(catalog_root / "Icons")
    assert sprite.lookup("Alpha") == (1, 0)
    assert sprite.lookup("Nope") == BLANK_COORDINATES
    assert lookup_coordinates(None, "Alpha") == BLANK_COORDINATES


def test_undecodable_icon_raises(catalog_root: Path) -> None:
    (catalog_root / "Icons" / "broken.png").write_bytes(b"not a png")
    with pytest.raises(SpriteError, match="broken.png"):
        pack_icon_sprite(catalog_root / "Icons")


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        pack_icon_sprite(tmp_path / "absent")

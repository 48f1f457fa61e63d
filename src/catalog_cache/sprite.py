# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pack the item icons into a single sprite sheet with a coordinate index."""

from __future__ import annotations

import base64
import io
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final

from PIL import Image, UnidentifiedImageError

from .errors import SpriteError
from .types import Coordinates

LOGGER = logging.getLogger(__name__)

ICON_WIDTH: Final[int] = 32
ICON_HEIGHT: Final[int] = 32
COLUMNS: Final[int] = 40
ICON_PATTERN: Final[str] = "*.png"
BLANK_ICON: Final[str] = "blank"
CSS_SELECTOR: Final[str] = ".mod-icon"
BLANK_COORDINATES: Final[Coordinates] = (0, 0)


@dataclass(frozen=True, slots=True)
class IconSprite:
    """Composite icon image, its CSS rule and the name → (column, row) index."""

    png: bytes
    css: str
    coordinates: Mapping[str, Coordinates] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", MappingProxyType(dict(self.coordinates)))

    def lookup(self, name: str) -> Coordinates:
        """Return the grid cell for ``name``, falling back to the blank icon's cell."""

        return lookup_coordinates(self.coordinates, name)


def lookup_coordinates(coordinates: Mapping[str, Coordinates] | None, name: str) -> Coordinates:
    """Return the grid cell for ``name`` or ``(0, 0)`` when it has no icon.

    Args:
        coordinates: Index produced by :func:`pack_icon_sprite`, ``None`` when packing failed.
        name: Icon name without extension.

    Returns:
        Coordinates: ``(column, row)`` of the icon, or the blank icon's cell.
    """

    if coordinates is None:
        return BLANK_COORDINATES
    return coordinates.get(name, BLANK_COORDINATES)


def icon_sort_key(path: Path) -> tuple[bool, str]:
    """Order icons so the blank icon comes first and the rest sort by name."""

    return (path.stem != BLANK_ICON, path.name)


def pack_icon_sprite(icon_dir: Path) -> IconSprite:
    """Compose every PNG in ``icon_dir`` into one sprite sheet.

    Icons are laid out left to right, top to bottom, ``COLUMNS`` per row. The
    blank icon, when present, always lands on ``(0, 0)`` so that cell is a safe
    default for items without an icon. Icons that are not ``32x32`` are scaled
    to fit their cell.

    Args:
        icon_dir: Directory holding one ``.png`` file per icon.

    Returns:
        IconSprite: PNG bytes, the CSS rule embedding them, and the coordinate index.

    Raises:
        FileNotFoundError: If ``icon_dir`` does not exist.
        SpriteError: If an icon cannot be decoded.
    """

    if not icon_dir.is_dir():
        raise FileNotFoundError(icon_dir)
    icon_files = sorted((path for path in icon_dir.glob(ICON_PATTERN) if path.is_file()), key=icon_sort_key)
    rows = max(1, (len(icon_files) + COLUMNS - 1) // COLUMNS)
    coordinates: dict[str, Coordinates] = {}
    with Image.new("RGBA", (ICON_WIDTH * COLUMNS, ICON_HEIGHT * rows), (0, 0, 0, 0)) as sheet:
        for index, path in enumerate(icon_files):
            column, row = index % COLUMNS, index // COLUMNS
            with _open_icon(path) as icon:
                sheet.paste(icon, (ICON_WIDTH * column, ICON_HEIGHT * row))
            coordinates[path.stem] = (column, row)
        buffer = io.BytesIO()
        sheet.save(buffer, format="PNG")

    png = buffer.getvalue()
    LOGGER.info("packed %d icons into a %dx%d sprite", len(icon_files), COLUMNS, rows)
    return IconSprite(png=png, css=sprite_css(png), coordinates=coordinates)


def sprite_css(png: bytes) -> str:
    """Return the CSS rule embedding ``png`` as a base64 data URI."""

    encoded = base64.b64encode(png).decode("ascii")
    return f"{CSS_SELECTOR}{{background-image:url(data:image/png;base64,{encoded})}}"


def _open_icon(path: Path) -> Image.Image:
    """Load ``path`` as an RGBA image sized to one sprite cell."""

    try:
        with Image.open(path) as raw:
            icon = raw.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        raise SpriteError(f"{path.name}: cannot decode icon ({exc})") from exc
    if icon.size != (ICON_WIDTH, ICON_HEIGHT):
        LOGGER.warning("icon %s is %dx%d; scaling to %dx%d", path.name, *icon.size, ICON_WIDTH, ICON_HEIGHT)
        resized = icon.resize((ICON_WIDTH, ICON_HEIGHT), Image.Resampling.LANCZOS)
        icon.close()
        return resized
    return icon


__all__ = [
    "BLANK_COORDINATES",
    "COLUMNS",
    "CSS_SELECTOR",
    "IconSprite",
    "icon_sort_key",
    "lookup_coordinates",
    "pack_icon_sprite",
    "sprite_css",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Immutable cache snapshot and the serialized forms handed to the page."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Final

from .config import CacheSettings
from .models import ItemRecord, SouvenirStatus, json_number
from .types import JSONObject, JSONValue

PAYLOAD_KEY: Final[str] = "KtaneModules"
INITIALIZER_FUNCTION: Final[str] = "initializePage"

SOUVENIR_TOOLTIPS: Final[Mapping[SouvenirStatus, tuple[str, str]]] = MappingProxyType(
    {
        SouvenirStatus.UNEXAMINED: ("Not yet examined for Souvenir support", "?"),
        SouvenirStatus.NOT_A_CANDIDATE: ("Not a candidate for Souvenir", "N"),
        SouvenirStatus.CONSIDERED: ("Considered for Souvenir; not yet supported", "C"),
        SouvenirStatus.SUPPORTED: ("Supported by Souvenir", "S"),
    },
)


def souvenir_table() -> JSONObject:
    """Return the Souvenir tooltip table keyed by status name."""

    return {status.value: {"Tooltip": tooltip, "Char": glyph} for status, (tooltip, glyph) in SOUVENIR_TOOLTIPS.items()}


def freeze_json(value: object) -> object:
    """Return a read-only deep copy of a JSON value: objects become mapping proxies, arrays tuples."""

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_json(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_json(item) for item in value)
    return value


def _json_default(value: object) -> JSONValue:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Decimal):
        return json_number(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: object) -> str:
    """Serialize ``value`` compactly, converting decimals and datetimes."""

    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


@dataclass(frozen=True, slots=True)
class InitializerArguments:
    """Positional arguments of the page initializer, in call order."""

    items: Sequence[JSONValue]
    icon_dirs: Sequence[str]
    document_dirs: Sequence[str]
    displays: Sequence[JSONValue]
    filters: Sequence[JSONValue]
    selectables: Sequence[JSONValue]
    souvenir: Mapping[str, JSONValue]
    errors: Sequence[str]
    contact_info: JSONValue

    def ordered(self) -> tuple[object, ...]:
        """Return the arguments in the order the page expects them."""

        return (
            list(self.items),
            list(self.icon_dirs),
            list(self.document_dirs),
            list(self.displays),
            list(self.filters),
            list(self.selectables),
            dict(self.souvenir),
            list(self.errors),
            self.contact_info if self.contact_info is not None else {},
        )

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        *,
        items: Sequence[JSONValue],
        errors: Sequence[str],
        contact_info: JSONValue,
    ) -> InitializerArguments:
        """Build the argument list from ``settings`` and the rebuild's results."""

        return cls(
            items=items,
            icon_dirs=settings.icon_dirs(),
            document_dirs=settings.document_dirs,
            displays=settings.displays,
            filters=settings.filters,
            selectables=settings.selectables,
            souvenir=souvenir_table(),
            errors=errors,
            contact_info=contact_info,
        )


def render_initializer(arguments: InitializerArguments) -> str:
    """Return the script statement that hands the cache to the page.

    The argument order is the contract with the page script and must not change.
    """

    rendered = ",".join(to_json(argument) for argument in arguments.ordered())
    return f"{INITIALIZER_FUNCTION}({rendered});"


@dataclass(frozen=True, slots=True)
class CacheSnapshot:
    """Everything one rebuild produced, published as a single immutable unit.

    Construction detaches the snapshot from its inputs: records become frozen
    copies and documents become read-only mapping proxies, so nothing a reader
    holds can change what later readers see.
    """

    items: tuple[ItemRecord, ...]
    documents: tuple[Mapping[str, JSONValue], ...]
    icon_sprite_png: bytes
    icon_sprite_css: str
    initializer_js: str
    last_modified: datetime | None
    errors: tuple[str, ...] = ()
    manifest_last_modified: Mapping[str, datetime] = field(default_factory=dict)
    generated_artifacts: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(record.published() for record in self.items))
        object.__setattr__(self, "documents", tuple(freeze_json(document) for document in self.documents))
        object.__setattr__(self, "manifest_last_modified", MappingProxyType(dict(self.manifest_last_modified)))
        object.__setattr__(self, "generated_artifacts", MappingProxyType(dict(self.generated_artifacts)))

    @property
    def payload(self) -> JSONObject:
        """Return the public item collection: every item, translations included."""

        return {PAYLOAD_KEY: [dict(document) for document in self.documents]}

    def payload_json(self) -> str:
        """Return :attr:`payload` serialized as JSON text."""

        return to_json(self.payload)

    def item(self, module_id: str) -> ItemRecord | None:
        """Return the item with ``module_id``, if present."""

        return next((record for record in self.items if record.module_id == module_id), None)


ARTIFACT_SPRITE: Final[str] = "icons.png"
ARTIFACT_CSS: Final[str] = "icons.css"
ARTIFACT_PAYLOAD: Final[str] = "modules.json"
ARTIFACT_INITIALIZER: Final[str] = "initialize.js"


def write_artifacts(snapshot: CacheSnapshot, directory: Path) -> tuple[Path, ...]:
    """Write the snapshot's servable artefacts into ``directory``.

    Args:
        snapshot: Published snapshot to export.
        directory: Destination directory, created when missing.

    Returns:
        tuple[Path, ...]: Paths of the sprite, CSS, payload and initializer files.
    """

    directory.mkdir(parents=True, exist_ok=True)
    sprite_path = directory / ARTIFACT_SPRITE
    sprite_path.write_bytes(snapshot.icon_sprite_png)
    css_path = directory / ARTIFACT_CSS
    css_path.write_text(snapshot.icon_sprite_css, encoding="utf-8")
    payload_path = directory / ARTIFACT_PAYLOAD
    payload_path.write_text(snapshot.payload_json(), encoding="utf-8")
    initializer_path = directory / ARTIFACT_INITIALIZER
    initializer_path.write_text(snapshot.initializer_js, encoding="utf-8")
    return (sprite_path, css_path, payload_path, initializer_path)


__all__ = [
    "CacheSnapshot",
    "InitializerArguments",
    "PAYLOAD_KEY",
    "SOUVENIR_TOOLTIPS",
    "freeze_json",
    "render_initializer",
    "souvenir_table",
    "to_json",
    "write_artifacts",
]

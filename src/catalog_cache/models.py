# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Item records parsed from manifests and the enums they reference."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .types import JSONObject

Contributors: TypeAlias = dict[str, list[str]]
"""Contribution role (``Developer``, ``Manual``, ``Maintainer``, ...) mapped to contributor names."""


class TimeModeOrigin(str, Enum):
    """Enumerate where a Time-Mode score came from."""

    UNASSIGNED = "Unassigned"
    ASSIGNED = "Assigned"
    COMMUNITY = "Community"
    TWITCH_PLAYS = "TwitchPlays"


class SouvenirStatus(str, Enum):
    """Enumerate the Souvenir support states an item can be in."""

    UNEXAMINED = "Unexamined"
    NOT_A_CANDIDATE = "NotACandidate"
    CONSIDERED = "Considered"
    SUPPORTED = "Supported"


def json_number(value: Decimal) -> int | float:
    """Return ``value`` as a JSON-friendly number, preferring integers when integral.

    Args:
        value: Decimal score to convert.

    Returns:
        int | float: ``int`` for integral values, ``float`` otherwise.
    """

    if value == value.to_integral_value():
        return int(value)
    return float(value)


class TimeModeInfo(BaseModel):
    """Time-Mode score data attached to an item.

    ``score`` and ``score_per_module`` are ``None`` until some source provides
    them. Mergers only fill a field that is still ``None``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    origin: TimeModeOrigin = Field(default=TimeModeOrigin.UNASSIGNED, alias="Origin")
    score: Decimal | None = Field(default=None, alias="Score")
    score_per_module: Decimal | None = Field(default=None, alias="ScorePerModule")

    def to_json(self) -> JSONObject:
        """Return the serialized form embedded in the item document."""

        return {
            "Origin": self.origin.value,
            "Score": None if self.score is None else json_number(self.score),
            "ScorePerModule": None if self.score_per_module is None else json_number(self.score_per_module),
        }


class ItemRecord(BaseModel):
    """One catalog entry parsed from a manifest, plus fields derived during a rebuild."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    module_id: str = Field(alias="ModuleID", min_length=1)
    name: str = Field(alias="Name", min_length=1)
    display_name: str | None = Field(default=None, alias="DisplayName")
    author: str | None = Field(default=None, alias="Author")
    contributors: Contributors | None = Field(default=None, alias="Contributors")
    translation_of: str | None = Field(default=None, alias="TranslationOf")
    solves_at_end: bool = Field(default=False, alias="SolvesAtEnd")
    needs_other_solves: bool = Field(default=False, alias="NeedsOtherSolves")
    solves_before_some: bool = Field(default=False, alias="SolvesBeforeSome")
    is_pseudo_needy: bool = Field(default=False, alias="IsPseudoNeedy")
    is_time_sensitive: bool = Field(default=False, alias="IsTimeSensitive")
    ignore: list[str] | None = Field(default=None, alias="Ignore")
    time_mode: TimeModeInfo | None = Field(default=None, alias="TimeMode")

    # Derived during the rebuild; never read from the manifest.
    file_name: str = Field(default="", exclude=True)
    ignore_processed: list[str] | None = Field(default=None, exclude=True)
    twitch_plays_score: Decimal | None = Field(default=None, exclude=True)
    twitch_plays_description: str | None = Field(default=None, exclude=True)
    sheets: list[str] = Field(default_factory=list, exclude=True)
    x: int = Field(default=0, exclude=True)
    y: int = Field(default=0, exclude=True)

    @property
    def effective_name(self) -> str:
        """Return the display name when present, otherwise the canonical name."""

        return self.name if self.display_name is None else self.display_name

    def published(self) -> PublishedItem:
        """Return a detached, frozen copy of this record for a published snapshot."""

        values: dict[str, Any] = {name: deepcopy(getattr(self, name)) for name in ItemRecord.model_fields}
        return PublishedItem.model_construct(_fields_set=set(self.model_fields_set), **values)


class PublishedItem(ItemRecord):
    """An :class:`ItemRecord` that rejects attribute assignment once published."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    def published(self) -> PublishedItem:
        return self


@dataclass(slots=True)
class ManifestEntry:
    """A parsed item together with its serialized document and source metadata.

    ``document`` is the JSON object that will be published. Enrichment writes to
    both ``record`` and ``document`` so consumers never need the filesystem.
    """

    record: ItemRecord
    document: JSONObject
    source: Path
    last_modified: datetime

    @property
    def file_name(self) -> str:
        """Return the slug the item's artefacts are stored under."""

        return self.record.file_name


__all__ = [
    "Contributors",
    "ItemRecord",
    "ManifestEntry",
    "PublishedItem",
    "SouvenirStatus",
    "TimeModeInfo",
    "TimeModeOrigin",
    "json_number",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases for catalog documents and feed payloads."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

Coordinates: TypeAlias = tuple[int, int]

__all__ = [
    "Coordinates",
    "JSONObject",
    "JSONPrimitive",
    "JSONValue",
]

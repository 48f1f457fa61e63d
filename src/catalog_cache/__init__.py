# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rebuild the in-memory catalog cache served to the catalog page."""

from __future__ import annotations

from .assembler import CacheAssembler
from .config import CacheSettings, ConfigError, load_settings
from .errors import CatalogCacheError, ErrorSink, FeedError, ManifestError, RebuildError, SpriteError
from .feeds import FeedClient, FeedEntry
from .models import ItemRecord, ManifestEntry, SouvenirStatus, TimeModeInfo, TimeModeOrigin
from .snapshot import CacheSnapshot
from .store import CacheStore

__all__ = [
    "CacheAssembler",
    "CacheSettings",
    "CacheSnapshot",
    "CacheStore",
    "CatalogCacheError",
    "ConfigError",
    "ErrorSink",
    "FeedClient",
    "FeedEntry",
    "FeedError",
    "ItemRecord",
    "ManifestEntry",
    "ManifestError",
    "RebuildError",
    "SouvenirStatus",
    "SpriteError",
    "TimeModeInfo",
    "TimeModeOrigin",
    "load_settings",
]

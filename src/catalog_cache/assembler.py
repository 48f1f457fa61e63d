# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rebuild the catalog cache from manifests, feeds, icons and contact info."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

from .config import CacheSettings
from .errors import ErrorSink, RebuildError, describe_task_failure
from .feeds import FeedClient, FeedEntry
from .ignore import IGNORE_PROCESSED_KEY, expand_ignore_list, needs_expansion
from .manifests import ManifestLoader
from .matching import find_feed_entry
from .models import ManifestEntry
from .scoring import merge_time_mode, merge_tp_score
from .sheets import enumerate_sheet_urls, related_item_names
from .snapshot import CacheSnapshot, InitializerArguments, render_initializer
from .sprite import IconSprite, lookup_coordinates, pack_icon_sprite
from .types import JSONValue

LOGGER = logging.getLogger(__name__)

SPRITE_TASK: Final[str] = "Generate icon sprite"
TP_TASK: Final[str] = "Retrieve TP data from Google Sheets"
TIME_MODE_TASK: Final[str] = "Retrieve Time Mode data from Google Sheets"
CONTACT_TASK: Final[str] = "Load contact info"

SHEETS_KEY: Final[str] = "Sheets"
X_KEY: Final[str] = "X"
Y_KEY: Final[str] = "Y"


@dataclass(slots=True)
class SourceData:
    """Results of the independent rebuild tasks; ``None`` marks a failed or absent source."""

    sprite: IconSprite | None = None
    tp_entries: list[FeedEntry] | None = None
    time_mode_entries: list[FeedEntry] | None = None
    contact_info: JSONValue | None = None


def load_contact_info(path: Path) -> JSONValue | None:
    """Return the parsed contact-info document, or ``None`` when the file does not exist.

    Raises:
        json.JSONDecodeError: If the document is not valid JSON.
    """

    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8-sig"))


class CacheAssembler:
    """Build a :class:`CacheSnapshot` from the sources named in :class:`CacheSettings`.

    The sprite, the two feeds and the contact info are produced by independent
    tasks that run while the manifests load; a failing task is recorded in the
    error sink and the rebuild continues without it. Enrichment runs once every
    task and every manifest has finished, because it needs the complete item
    set and coordinate index.
    """

    def __init__(
        self,
        settings: CacheSettings,
        *,
        feed_client: FeedClient | None = None,
        sprite_packer: Callable[[Path], IconSprite] = pack_icon_sprite,
    ) -> None:
        self.settings = settings
        self.feed_client = feed_client or FeedClient(timeout=settings.request_timeout)
        self.sprite_packer = sprite_packer

    def build(self) -> CacheSnapshot:
        """Run one complete rebuild.

        Returns:
            CacheSnapshot: Snapshot ready to publish.

        Raises:
            RebuildError: If the manifest or icon directory is missing.
        """

        self._check_inputs()
        sink = ErrorSink()
        loader = ManifestLoader(self.settings.manifest_path, workers=self.settings.workers)

        with ThreadPoolExecutor(max_workers=4, thread_name_prefix="cache-source") as executor:
            futures = self._submit_sources(executor)
            loaded = loader.load()
            sources = self._collect_sources(futures, sink)
        sink.extend(loaded.errors)

        entries = loaded.entries
        self._enrich(entries, sources)
        return self._snapshot(entries, sources, sink)

    def _check_inputs(self) -> None:
        for label, path in (("manifest", self.settings.manifest_path), ("icon", self.settings.icon_path)):
            if not path.is_dir():
                raise RebuildError(f"{label} directory {path} does not exist")

    def _submit_sources(self, executor: ThreadPoolExecutor) -> dict[str, Future[object]]:
        settings = self.settings
        return {
            SPRITE_TASK: executor.submit(self.sprite_packer, settings.icon_path),
            TP_TASK: executor.submit(self.feed_client.fetch, settings.tp_feed_url),
            TIME_MODE_TASK: executor.submit(self.feed_client.fetch, settings.time_mode_feed_url),
            CONTACT_TASK: executor.submit(load_contact_info, settings.contact_info_path),
        }

    @staticmethod
    def _collect_sources(futures: Mapping[str, Future[object]], sink: ErrorSink) -> SourceData:
        results: dict[str, object] = {}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except Exception as exc:
                LOGGER.error("%s failed", name, exc_info=exc)
                sink.append(describe_task_failure(name, exc))
        return SourceData(
            sprite=cast(IconSprite | None, results.get(SPRITE_TASK)),
            tp_entries=cast(list[FeedEntry] | None, results.get(TP_TASK)),
            time_mode_entries=cast(list[FeedEntry] | None, results.get(TIME_MODE_TASK)),
            contact_info=cast(JSONValue | None, results.get(CONTACT_TASK)),
        )

    def _enrich(self, entries: Sequence[ManifestEntry], sources: SourceData) -> None:
        records = [entry.record for entry in entries]
        names = [record.name for record in records]
        by_id: dict[str, ManifestEntry] = {}
        for entry in entries:
            by_id.setdefault(entry.record.module_id, entry)
        coordinates = sources.sprite.coordinates if sources.sprite is not None else None

        for entry in entries:
            record = entry.record
            if needs_expansion(record.ignore):
                record.ignore_processed = expand_ignore_list(record.ignore or [], records)
                entry.document[IGNORE_PROCESSED_KEY] = list(record.ignore_processed)

            time_mode_row = find_feed_entry(sources.time_mode_entries, record.effective_name)
            if time_mode_row is not None:
                merge_time_mode(entry, time_mode_row)

            tp_row = find_feed_entry(sources.tp_entries, record.effective_name)
            if tp_row is not None:
                merge_tp_score(entry, tp_row.cell("tpscore"))

            icon_name = entry.file_name
            if record.translation_of is None:
                related = related_item_names(record.name, names)
                record.sheets = enumerate_sheet_urls(entry.file_name, related, self.settings)
                entry.document[SHEETS_KEY] = list(record.sheets)
            elif coordinates is None or icon_name not in coordinates:
                original = by_id.get(record.translation_of)
                if original is not None:
                    icon_name = original.file_name

            record.x, record.y = lookup_coordinates(coordinates, icon_name)
            entry.document[X_KEY] = record.x
            entry.document[Y_KEY] = record.y

    def _snapshot(self, entries: Sequence[ManifestEntry], sources: SourceData, sink: ErrorSink) -> CacheSnapshot:
        errors = sink.snapshot()
        listing = [entry.document for entry in entries if entry.record.translation_of is None]
        arguments = InitializerArguments.from_settings(
            self.settings,
            items=listing,
            errors=errors,
            contact_info=sources.contact_info,
        )
        sprite = sources.sprite
        last_modified = max((entry.last_modified for entry in entries), default=None)
        LOGGER.info("assembled cache with %d items and %d recorded errors", len(entries), len(errors))
        return CacheSnapshot(
            items=tuple(entry.record for entry in entries),
            documents=tuple(entry.document for entry in entries),
            icon_sprite_png=sprite.png if sprite is not None else b"",
            icon_sprite_css=sprite.css if sprite is not None else "",
            initializer_js=render_initializer(arguments),
            last_modified=last_modified,
            errors=errors,
            manifest_last_modified={entry.source.name: entry.last_modified for entry in entries},
        )


__all__ = ["CONTACT_TASK", "CacheAssembler", "SPRITE_TASK", "SourceData", "TIME_MODE_TASK", "TP_TASK", "load_contact_info"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load per-item manifest documents in parallel, isolating per-file failures."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from .config import default_workers
from .errors import ManifestError, RebuildError
from .models import ItemRecord, ManifestEntry
from .types import JSONObject

LOGGER = logging.getLogger(__name__)

MANIFEST_PATTERN: Final[str] = "*.json"
FILE_NAME_KEY: Final[str] = "FileName"
AUTHOR_KEY: Final[str] = "Author"


@dataclass(frozen=True, slots=True)
class ManifestLoadResult:
    """Entries that loaded successfully and one message per file that did not."""

    entries: tuple[ManifestEntry, ...]
    errors: tuple[str, ...]


def format_author(contributors: Mapping[str, Sequence[str]]) -> str:
    """Collapse a role → names mapping into a single author string.

    Names appear in role order, each only once.

    Args:
        contributors: Mapping of contribution roles to contributor names.

    Returns:
        str: Names joined with ``", "``.
    """

    names: dict[str, None] = {}
    for role_names in contributors.values():
        for name in role_names:
            cleaned = name.strip()
            if cleaned:
                names.setdefault(cleaned, None)
    return ", ".join(names)


def load_manifest(path: Path) -> ManifestEntry:
    """Parse a single manifest file and normalise its derived fields.

    The file name without extension becomes the item's slug; when it differs
    from the item name the serialized document records it explicitly. An empty
    author is derived from the contributor list when one exists.

    Args:
        path: Manifest document to read.

    Returns:
        ManifestEntry: Parsed record, its serialized document and modification time.

    Raises:
        ManifestError: If the file cannot be read, is not a JSON object, or fails validation.
    """

    try:
        text = path.read_text(encoding="utf-8-sig")
        stat = path.stat()
    except OSError as exc:
        raise ManifestError(path, f"cannot read manifest: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestError(path, "manifest must be a JSON object")
    try:
        record = ItemRecord.model_validate(document)
    except ValidationError as exc:
        raise ManifestError(path, _summarise_validation(exc)) from exc

    normalised: JSONObject = document
    record.file_name = path.stem
    if record.name != record.file_name:
        normalised[FILE_NAME_KEY] = record.file_name
    if not record.author and record.contributors:
        record.author = format_author(record.contributors)
        normalised[AUTHOR_KEY] = record.author

    return ManifestEntry(
        record=record,
        document=normalised,
        source=path,
        last_modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
    )


class ManifestLoader:
    """Load every manifest in a directory using a bounded worker pool."""

    def __init__(self, manifest_dir: Path, *, workers: int | None = None) -> None:
        self.manifest_dir = manifest_dir
        self.workers = workers or default_workers()

    def manifest_files(self) -> tuple[Path, ...]:
        """Return the manifest files to load.

        Raises:
            RebuildError: If the manifest directory does not exist.
        """

        if not self.manifest_dir.is_dir():
            raise RebuildError(f"manifest directory {self.manifest_dir} does not exist")
        return tuple(sorted(path for path in self.manifest_dir.glob(MANIFEST_PATTERN) if path.is_file()))

    def load(self) -> ManifestLoadResult:
        """Load every manifest, skipping the ones that fail.

        Each worker reports its own failure message; messages are folded once the
        pool has joined. Entries are ordered by file name, case-insensitively.

        Returns:
            ManifestLoadResult: Loaded entries and per-file failure messages.

        Raises:
            RebuildError: If the manifest directory does not exist.
        """

        paths = self.manifest_files()
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            outcomes = list(executor.map(_load_isolated, paths))

        entries = [entry for entry, _ in outcomes if entry is not None]
        errors = tuple(error for _, error in outcomes if error is not None)
        entries.sort(key=lambda entry: entry.file_name.casefold())
        LOGGER.info("loaded %d of %d manifests from %s", len(entries), len(paths), self.manifest_dir)
        return ManifestLoadResult(entries=tuple(entries), errors=errors)


def _load_isolated(path: Path) -> tuple[ManifestEntry | None, str | None]:
    """Load ``path``, converting a failure into a sink message."""

    try:
        return load_manifest(path), None
    except ManifestError as exc:
        LOGGER.exception("failed to load manifest %s", path.name)
        return None, f"{path.name} error: {exc}"


def _summarise_validation(exc: ValidationError) -> str:
    """Return a one-line summary of a pydantic validation failure."""

    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


__all__ = [
    "ManifestLoadResult",
    "ManifestLoader",
    "format_author",
    "load_manifest",
]

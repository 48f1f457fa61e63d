# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions and the shared ingestion error sink."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from threading import Lock


class CatalogCacheError(RuntimeError):
    """Base class for failures raised while rebuilding the catalog cache."""


class ManifestError(CatalogCacheError):
    """Raised when a single manifest document cannot be parsed or validated."""

    def __init__(self, path: Path, message: str) -> None:
        """Create the error for ``path`` with a human-readable ``message``.

        Args:
            path: Manifest file that failed to load.
            message: Description of the failure.
        """

        super().__init__(message)
        self.path = path


class FeedError(CatalogCacheError):
    """Raised when an external feed responds with a malformed payload."""


class SpriteError(CatalogCacheError):
    """Raised when an icon cannot be placed into the sprite sheet."""


class RebuildError(CatalogCacheError):
    """Raised when a rebuild cannot proceed at all (for example a missing input directory)."""


class ErrorSink:
    """Append-only, thread-safe collection of ingestion failure messages.

    The contents are shipped verbatim in the published payload so the page can
    surface ingestion problems without failing the rebuild.
    """

    def __init__(self) -> None:
        self._messages: list[str] = []
        self._lock = Lock()

    def append(self, message: str) -> None:
        """Record ``message``.

        Args:
            message: One-line description of the failure.
        """

        with self._lock:
            self._messages.append(message)

    def extend(self, messages: Iterable[str]) -> None:
        """Record every message in ``messages`` as one atomic fold.

        Args:
            messages: Worker-local messages collected after a parallel region joined.
        """

        batch = list(messages)
        with self._lock:
            self._messages.extend(batch)

    def snapshot(self) -> tuple[str, ...]:
        """Return an immutable copy of the recorded messages.

        Returns:
            tuple[str, ...]: Messages in the order they were recorded.
        """

        with self._lock:
            return tuple(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


def describe_task_failure(task_name: str, exc: BaseException) -> str:
    """Return the sink message for a failed rebuild task.

    Args:
        task_name: Human-readable task label.
        exc: Exception raised by the task.

    Returns:
        str: Message naming the task, the error text and the qualified exception type.
    """

    exc_type = type(exc)
    qualified = f"{exc_type.__module__}.{exc_type.__qualname__}"
    return f"{task_name} ERROR: {exc} ({qualified})"


__all__ = (
    "CatalogCacheError",
    "ErrorSink",
    "FeedError",
    "ManifestError",
    "RebuildError",
    "SpriteError",
    "describe_task_failure",
)

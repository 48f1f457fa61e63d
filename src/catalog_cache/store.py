# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hold the published snapshot and swap in new ones as rebuilds complete."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock, Thread

from .snapshot import CacheSnapshot

LOGGER = logging.getLogger(__name__)


class CacheStore:
    """Publish snapshots produced by ``builder`` through a single reference.

    Readers call :meth:`current` without locking and always receive either the
    previous or the new snapshot in full. Rebuilds are serialised; a rebuild
    that raises leaves the published snapshot untouched.
    """

    def __init__(self, builder: Callable[[], CacheSnapshot]) -> None:
        self._builder = builder
        self._snapshot: CacheSnapshot | None = None
        self._rebuild_lock = Lock()
        self._thread: Thread | None = None
        self.last_error: BaseException | None = None
        self.last_rebuild_seconds: float | None = None

    def current(self) -> CacheSnapshot | None:
        """Return the published snapshot, or ``None`` before the first successful rebuild."""

        return self._snapshot

    def rebuild(self) -> CacheSnapshot:
        """Build a new snapshot and publish it.

        Returns:
            CacheSnapshot: The newly published snapshot.

        Raises:
            Exception: Whatever the builder raised; the previous snapshot stays published.
        """

        with self._rebuild_lock:
            return self._rebuild_locked()

    def request_rebuild(self) -> bool:
        """Start a background rebuild in response to an external update signal.

        Returns:
            bool: ``True`` when a rebuild was started, ``False`` when one is already running.
        """

        if not self._rebuild_lock.acquire(blocking=False):
            LOGGER.info("rebuild already in progress; skipping trigger")
            return False
        thread = Thread(target=self._background_rebuild, name="cache-rebuild", daemon=True)
        self._thread = thread
        try:
            thread.start()
        except RuntimeError:
            self._rebuild_lock.release()
            raise
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the most recent background rebuild to finish.

        Returns:
            bool: ``True`` when no background rebuild is still running.
        """

        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _background_rebuild(self) -> None:
        try:
            self._rebuild_locked()
        except Exception:
            LOGGER.exception("background cache rebuild failed; keeping the previous snapshot")
        finally:
            self._rebuild_lock.release()

    def _rebuild_locked(self) -> CacheSnapshot:
        started = time.monotonic()
        try:
            snapshot = self._builder()
        except Exception as exc:
            self.last_error = exc
            raise
        self._snapshot = snapshot
        self.last_error = None
        self.last_rebuild_seconds = time.monotonic() - started
        LOGGER.info("published cache snapshot in %.2fs", self.last_rebuild_seconds)
        return snapshot


__all__ = ["CacheStore"]

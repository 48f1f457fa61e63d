# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Client for the spreadsheet feeds that supply Time-Mode and TP scores."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

import httpx
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from .errors import FeedError

LOGGER = logging.getLogger(__name__)

COLUMN_PREFIX: Final[str] = "gsx$"
TEXT_KEY: Final[str] = "$t"
NAME_COLUMN: Final[str] = "modulename"
FETCH_ATTEMPTS: Final[int] = 5
FETCH_DELAY_SECONDS: Final[float] = 0.7
RETRYABLE_ERRORS: Final[tuple[type[Exception], ...]] = (httpx.HTTPError, FeedError, ValueError)


@dataclass(frozen=True, slots=True)
class FeedEntry:
    """One feed row: free-text cells keyed by column name.

    Cells are kept as text. Numeric interpretation is left to the mergers.
    """

    cells: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    @classmethod
    def from_row(cls, row: Mapping[str, object]) -> FeedEntry:
        """Build an entry from a list-feed row.

        Args:
            row: Mapping of ``gsx$<column>`` keys to ``{"$t": text}`` cells.

        Returns:
            FeedEntry: Entry exposing each column without its prefix.

        Raises:
            FeedError: If a column cell is not an object carrying a text value.
        """

        cells: dict[str, str] = {}
        for key, cell in row.items():
            if not key.startswith(COLUMN_PREFIX):
                continue
            if not isinstance(cell, Mapping):
                raise FeedError(f"feed cell {key!r} is not an object")
            text = cell.get(TEXT_KEY, "")
            cells[key[len(COLUMN_PREFIX) :]] = "" if text is None else str(text)
        return cls(cells=cells)

    def cell(self, column: str) -> str:
        """Return the text of ``column``, or ``""`` when the row lacks it."""

        return self.cells.get(column, "")

    @property
    def name(self) -> str:
        """Return the item-name cell."""

        return self.cell(NAME_COLUMN)


def parse_feed(payload: object) -> list[FeedEntry]:
    """Extract the ordered entries of a list-feed document.

    Args:
        payload: Decoded JSON document of the shape ``{"feed": {"entry": [...]}}``.

    Returns:
        list[FeedEntry]: Entries in feed order.

    Raises:
        FeedError: If the document does not have the expected shape.
    """

    if not isinstance(payload, Mapping):
        raise FeedError("feed document is not a JSON object")
    feed = payload.get("feed")
    if not isinstance(feed, Mapping):
        raise FeedError("feed document has no 'feed' object")
    rows = feed.get("entry")
    if not isinstance(rows, Sequence) or isinstance(rows, (str, bytes)):
        raise FeedError("feed document has no 'feed.entry' list")
    entries: list[FeedEntry] = []
    for row in rows:
        if not isinstance(row, Mapping):
            raise FeedError("feed entry is not a JSON object")
        entries.append(FeedEntry.from_row(row))
    return entries


class FeedClient:
    """Fetch list feeds over HTTPS, retrying transient failures.

    Network errors, HTTP error statuses and malformed bodies are retried up to
    ``attempts`` times, ``delay`` seconds apart. Once attempts are exhausted the
    last error propagates to the caller.
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        attempts: int = FETCH_ATTEMPTS,
        delay: float = FETCH_DELAY_SECONDS,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.timeout = timeout
        self.attempts = attempts
        self.delay = delay
        self._transport = transport
        self._sleep = sleep

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
            sleep=self._sleep,
        )

    def fetch(self, url: str) -> list[FeedEntry]:
        """Return the entries published at ``url``.

        Args:
            url: Feed endpoint.

        Returns:
            list[FeedEntry]: Entries in feed order.

        Raises:
            httpx.HTTPError: When every attempt failed at the transport or HTTP level.
            FeedError: When every attempt returned a malformed document.
            ValueError: When every attempt returned a body that is not JSON.
        """

        with httpx.Client(timeout=self.timeout, transport=self._transport, follow_redirects=True) as client:
            return self._retrying()(self._fetch_once, client, url)

    @staticmethod
    def _fetch_once(client: httpx.Client, url: str) -> list[FeedEntry]:
        response = client.get(url)
        response.raise_for_status()
        entries = parse_feed(response.json())
        LOGGER.debug("fetched %d feed entries from %s", len(entries), url)
        return entries


__all__ = ["FETCH_ATTEMPTS", "FETCH_DELAY_SECONDS", "FeedClient", "FeedEntry", "parse_feed"]

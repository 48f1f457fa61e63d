# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, options)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer
from rich.console import Console
from rich.text import Text

from ..config import CacheSettings, ConfigError, load_settings

DEFAULT_CONFIG_PATH: Final[Path] = Path("catalog-cache.toml")

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Settings file (catalog-cache.toml or pyproject.toml)."),
]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging.")]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


# level -> (emoji prefix, style)
_LEVELS: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


@dataclass(slots=True)
class CLILogger:
    """Status output for cache commands, rendered on a single Rich console."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        """Print a failure message."""

        self._line("fail", message)

    def warn(self, message: str) -> None:
        """Print a warning message."""

        self._line("warn", message)

    def ok(self, message: str) -> None:
        """Print a success message."""

        self._line("ok", message)

    def info(self, message: str) -> None:
        """Print an informational message."""

        self._line("info", message)

    def ingestion_errors(self, errors: Sequence[str]) -> None:
        """Print the errors a rebuild recorded, one warning per message, after a count header.

        Args:
            errors: Messages from the snapshot's error list, in recorded order.
        """

        if not errors:
            return
        self.warn(f"{len(errors)} ingestion error(s) recorded during the rebuild:")
        for message in errors:
            self.warn(f"  {message}")

    def _line(self, level: str, message: str) -> None:
        prefix, style = _LEVELS[level]
        # Plain Text: messages are never parsed as markup.
        text = Text(f"{prefix if self.use_emoji else ''}{message}", style=style)
        self.console.print(text)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a :class:`CLILogger` configured for the provided preferences.

    Args:
        emoji: Whether status lines carry emoji prefixes.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True, emoji=False)
    return CLILogger(console=console, use_emoji=emoji)


def configure_logging(*, debug: bool) -> None:
    """Route library logging to stderr at ``DEBUG`` or ``WARNING`` level."""

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def load_cli_settings(path: Path) -> CacheSettings:
    """Load settings for a command, converting configuration problems into :class:`CLIError`."""

    try:
        return load_settings(path)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc


__all__ = [
    "CLIError",
    "CLILogger",
    "ConfigOption",
    "DEFAULT_CONFIG_PATH",
    "DebugOption",
    "NoColorOption",
    "NoEmojiOption",
    "build_cli_logger",
    "configure_logging",
    "load_cli_settings",
]

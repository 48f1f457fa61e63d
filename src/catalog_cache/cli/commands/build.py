# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run a full cache rebuild and export its artefacts."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ...assembler import CacheAssembler
from ...errors import RebuildError
from ...snapshot import CacheSnapshot, write_artifacts
from ...store import CacheStore
from ..shared import (
    DEFAULT_CONFIG_PATH,
    CLIError,
    ConfigOption,
    DebugOption,
    NoColorOption,
    NoEmojiOption,
    build_cli_logger,
    configure_logging,
    load_cli_settings,
)


def _summary_table(snapshot: CacheSnapshot, written: tuple[Path, ...]) -> Table:
    table = Table(title="Catalog cache", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    translations = sum(1 for record in snapshot.items if record.translation_of is not None)
    table.add_row("Items", str(len(snapshot.items)))
    table.add_row("Translations", str(translations))
    table.add_row("Sprite bytes", str(len(snapshot.icon_sprite_png)))
    last_modified = snapshot.last_modified.isoformat() if snapshot.last_modified else "-"
    table.add_row("Last modified", last_modified)
    table.add_row("Ingestion errors", str(len(snapshot.errors)))
    for path in written:
        table.add_row("Wrote", str(path))
    return table


def build_command(
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Directory receiving the exported artefacts."),
    ] = Path("cache-out"),
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    debug: DebugOption = False,
) -> None:
    """Rebuild the cache and write the sprite, CSS, payload and initializer."""

    configure_logging(debug=debug)
    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    try:
        settings = load_cli_settings(config)
        logger.info(f"Rebuilding cache from {settings.base_dir}")
        store = CacheStore(CacheAssembler(settings).build)
        try:
            snapshot = store.rebuild()
        except RebuildError as exc:
            raise CLIError(f"Rebuild aborted: {exc}") from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    written = write_artifacts(snapshot, output)
    logger.console.print(_summary_table(snapshot, written))
    logger.ingestion_errors(snapshot.errors)
    logger.ok(f"Published {len(snapshot.items)} items")


def register(app: typer.Typer) -> None:
    """Register the ``build`` command on ``app``."""

    app.command("build")(build_command)


__all__ = ["build_command", "register"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validate the manifest directory without touching feeds or icons."""

from __future__ import annotations

import typer

from ...errors import RebuildError
from ...manifests import ManifestLoader
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


def check_command(
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    no_emoji: NoEmojiOption = False,
    no_color: NoColorOption = False,
    debug: DebugOption = False,
) -> None:
    """Load every manifest and report the ones that fail to parse."""

    configure_logging(debug=debug)
    logger = build_cli_logger(emoji=not no_emoji, no_color=no_color)
    try:
        settings = load_cli_settings(config)
        try:
            result = ManifestLoader(settings.manifest_path, workers=settings.workers).load()
        except RebuildError as exc:
            raise CLIError(str(exc)) from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    for message in result.errors:
        logger.fail(message)
    if result.errors:
        logger.warn(f"{len(result.errors)} manifest(s) failed; {len(result.entries)} loaded")
        raise typer.Exit(code=1)
    logger.ok(f"All {len(result.entries)} manifests loaded")


def register(app: typer.Typer) -> None:
    """Register the ``check`` command on ``app``."""

    app.command("check")(check_command)


__all__ = ["check_command", "register"]

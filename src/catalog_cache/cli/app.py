# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    name="catalog-cache",
    help="Rebuild and export the catalog page cache.",
    no_args_is_help=True,
    add_completion=False,
)
register_commands(app)

__all__ = ["app"]

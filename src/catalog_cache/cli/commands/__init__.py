# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import build, check, score

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register every built-in command on ``app``."""

    build.register(app)
    check.register(app)
    score.register(app)

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Evaluate a TP score formula from the command line."""

from __future__ import annotations

from typing import Annotated

import typer

from ...models import json_number
from ...scoring import parse_tp_score


def score_command(
    formula: Annotated[str, typer.Argument(help='Score formula, for example "10 + T 0.5".')],
) -> None:
    """Print the score and description for ``formula``."""

    result = parse_tp_score(formula)
    typer.echo(f"Score: {json_number(result.score)}")
    typer.echo(f"Description: {result.description or '-'}")


def register(app: typer.Typer) -> None:
    """Register the ``score`` command on ``app``."""

    app.command("score")(score_command)


__all__ = ["register", "score_command"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point."""

from __future__ import annotations

from .migrate import migrate_command
from .typer_ext import create_typer

app = create_typer(
    help="Migrate installed CPAN modules from one perl to another.",
    add_completion=False,
)
app.command(name="perl-migrate-modules")(migrate_command)


def main() -> None:
    """Console script entry point."""

    app(prog_name="perl-migrate-modules")


__all__ = ["app", "main"]

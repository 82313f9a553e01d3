# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``perl-migrate-modules`` command."""

from __future__ import annotations

import typer

from .. import __version__
from ..config import ConfigError, load_settings
from ..corelist import load_registry_file
from ..errors import MigrationError
from ..logging import fail, info, ok
from ..pipeline import migrate
from .options import (
    CORE_REGISTRY_OPTION,
    EMOJI_OPTION,
    FROM_OPTION,
    INCLUDE_CORE_OPTION,
    LIB_OPTION,
    NOTEST_OPTION,
    QUIET_OPTION,
    TARGETS_ARGUMENT,
    build_migrate_options,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"perl-migrate-modules {__version__}")
        raise typer.Exit(code=0)


def migrate_command(
    targets: TARGETS_ARGUMENT,
    include_core: INCLUDE_CORE_OPTION = False,
    from_paths: FROM_OPTION = None,
    lib_paths: LIB_OPTION = None,
    notest: NOTEST_OPTION = False,
    quiet: QUIET_OPTION = False,
    core_registry: CORE_REGISTRY_OPTION = None,
    emoji: EMOJI_OPTION = None,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Reinstall the CPAN modules of one perl into another using cpanm."""

    options = build_migrate_options(
        targets,
        include_core=include_core,
        from_paths=from_paths,
        lib_paths=lib_paths,
        notest=notest,
        quiet=quiet,
        core_registry=core_registry,
        emoji=emoji,
    )

    try:
        settings = load_settings()
    except ConfigError as exc:
        fail(str(exc), use_emoji=bool(options.emoji))
        raise typer.Exit(code=1) from exc
    use_emoji = settings.emoji if options.emoji is None else options.emoji

    try:
        registry = load_registry_file(options.core_registry) if options.core_registry else None
        report = migrate(
            options.request,
            settings=settings,
            registry=registry,
            announce=lambda message: info(message, use_emoji=use_emoji),
        )
    except MigrationError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=exc.exit_code) from exc
    except OSError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=1) from exc

    ok(
        f"Migrated {report.modules_sent} modules to {report.destination.executable}",
        use_emoji=use_emoji,
    )


__all__ = ["migrate_command"]

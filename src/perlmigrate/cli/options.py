# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer parameter declarations and their normalised form."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..installer import InstallerOptions
from ..listing import SearchPaths
from ..pipeline import MigrationRequest

TARGETS_ARGUMENT = Annotated[
    list[str],
    typer.Argument(
        metavar="[SOURCE] DESTINATION",
        help="Perl installation directories or perl executables. A single value is used as both.",
        show_default=False,
    ),
]
INCLUDE_CORE_OPTION = Annotated[
    bool,
    typer.Option(
        "--include-core",
        "-c",
        help="Also install dual-life core modules of the source perl version.",
    ),
]
FROM_OPTION = Annotated[
    list[str] | None,
    typer.Option(
        "--from",
        "-f",
        help="Only list modules installed in this library path (repeatable).",
        show_default=False,
    ),
]
LIB_OPTION = Annotated[
    list[str] | None,
    typer.Option(
        "--lib",
        "-I",
        help="List modules from this library path in addition to @INC (repeatable).",
        show_default=False,
    ),
]
NOTEST_OPTION = Annotated[
    bool,
    typer.Option("--notest", "-n", help="Skip tests when installing modules."),
]
QUIET_OPTION = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Suppress non-essential cpanm output."),
]
CORE_REGISTRY_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--core-registry",
        help="JSON file mapping perl versions to core modules, used instead of Module::CoreList.",
        exists=True,
        dir_okay=False,
        readable=True,
        show_default=False,
    ),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output.", show_default=False),
]


@dataclass(slots=True)
class MigrateCLIOptions:
    """Normalised CLI inputs for the migrate command."""

    request: MigrationRequest
    core_registry: Path | None
    emoji: bool | None


def split_targets(targets: Sequence[str]) -> tuple[str | None, str]:
    """Return ``(source, destination)`` from the positional arguments.

    Raises:
        typer.BadParameter: If fewer than one or more than two values were given.
    """

    if len(targets) == 1:
        return None, targets[0]
    if len(targets) == 2:
        return targets[0], targets[1]
    raise typer.BadParameter(
        f"expected [SOURCE] DESTINATION, got {len(targets)} values",
        param_hint="'[SOURCE] DESTINATION'",
    )


def build_migrate_options(
    targets: Sequence[str],
    *,
    include_core: bool,
    from_paths: Sequence[str] | None,
    lib_paths: Sequence[str] | None,
    notest: bool,
    quiet: bool,
    core_registry: Path | None,
    emoji: bool | None,
) -> MigrateCLIOptions:
    """Construct :class:`MigrateCLIOptions` from Typer parameters."""

    source, destination = split_targets(targets)
    request = MigrationRequest(
        destination=destination,
        source=source,
        search_paths=SearchPaths(
            override=tuple(from_paths or ()),
            extra=tuple(lib_paths or ()),
        ),
        include_core=include_core,
        installer_options=InstallerOptions(notest=notest, quiet=quiet),
    )
    return MigrateCLIOptions(request=request, core_registry=core_registry, emoji=emoji)


__all__ = [
    "MigrateCLIOptions",
    "build_migrate_options",
    "split_targets",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coordinate a full module migration between two perl installations.

The coordinator is the only reader of the lister's stdout and the only writer
of the installer's stdin. Both children run concurrently; the parent relays
one line at a time and waits for the lister before the installer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .config import MigrationSettings
from .corelist import CoreModuleRegistry, PerlCoreListRegistry, resolve_core_modules
from .errors import InstallFailedError, ListingFailedError
from .fetch import fetch_installer, installer_workspace
from .installer import InstallerOptions, InstallerRunner
from .listing import ModuleLister, SearchPaths
from .paths import RuntimeTarget, resolve_targets

Announcer = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class MigrationRequest:
    """Everything the user asked for on the command line."""

    destination: str
    source: str | None = None
    search_paths: SearchPaths = field(default_factory=SearchPaths)
    include_core: bool = False
    installer_options: InstallerOptions = field(default_factory=InstallerOptions)


@dataclass(frozen=True, slots=True)
class ExitOutcome:
    """Exit statuses of the lister and installer children."""

    lister: int
    installer: int

    @property
    def succeeded(self) -> bool:
        return self.lister == 0 and self.installer == 0


@dataclass(frozen=True, slots=True)
class MigrationReport:
    """Summary of a successful migration."""

    source: RuntimeTarget
    destination: RuntimeTarget
    perl_version: str
    core_modules: tuple[str, ...]
    modules_sent: int
    outcome: ExitOutcome


def describe_migration(
    source: RuntimeTarget,
    destination: RuntimeTarget,
    search_paths: SearchPaths,
) -> list[str]:
    """Return the announcement lines printed before any work starts."""

    lines = [f"Migrating modules from {source.executable} to {destination.executable}"]
    if search_paths.override:
        lines.append(f"Listing modules only from: {', '.join(search_paths.override)}")
    if search_paths.extra:
        lines.append(f"Also listing modules from: {', '.join(search_paths.extra)}")
    return lines


def check_outcome(outcome: ExitOutcome) -> None:
    """Raise for the first failing child, checking the lister before the installer."""

    if outcome.lister != 0:
        raise ListingFailedError(outcome.lister)
    if outcome.installer != 0:
        raise InstallFailedError(outcome.installer)


def migrate(
    request: MigrationRequest,
    *,
    settings: MigrationSettings | None = None,
    registry: CoreModuleRegistry | None = None,
    announce: Announcer | None = None,
    cwd: Path | None = None,
) -> MigrationReport:
    """Run the migration described by *request*.

    Args:
        request: Source/destination identifiers and user options.
        settings: Installer URL, HTTP timeout and environment scrubbing list.
        registry: Core-module registry; defaults to ``Module::CoreList`` in
            the source perl.
        announce: Callback receiving the informational lines.
        cwd: Directory relative identifiers are resolved against.

    Returns:
        MigrationReport: Details of the completed run.

    Raises:
        MigrationError: On any fatal condition; nothing is retried.
    """

    settings = settings or MigrationSettings()
    source, destination = resolve_targets(request.source, request.destination, cwd=cwd)
    if announce is not None:
        for line in describe_migration(source, destination, request.search_paths):
            announce(line)

    with installer_workspace() as workspace:
        installer_path = fetch_installer(
            settings.installer_url,
            workspace,
            timeout=settings.http_timeout,
        )
        lister = ModuleLister(
            source.executable,
            request.search_paths,
            scrubbed_env=settings.scrubbed_env,
        )
        with lister:
            version = lister.read_version()
            core_modules: tuple[str, ...] = ()
            if request.include_core:
                if not version and (status := lister.wait()) != 0:
                    raise ListingFailedError(status)
                core_modules = resolve_core_modules(
                    version,
                    registry or PerlCoreListRegistry(source.executable),
                    include_core=True,
                )
            runner = InstallerRunner(destination.executable, installer_path, request.installer_options)
            with runner:
                sent = runner.feed(core_modules, lister.names())
                outcome = ExitOutcome(lister=lister.wait(), installer=runner.wait())

    check_outcome(outcome)
    return MigrationReport(
        source=source,
        destination=destination,
        perl_version=version,
        core_modules=core_modules,
        modules_sent=sent,
        outcome=outcome,
    )


__all__ = [
    "ExitOutcome",
    "MigrationReport",
    "MigrationRequest",
    "check_outcome",
    "describe_migration",
    "migrate",
]

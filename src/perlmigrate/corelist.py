# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Look up dual-life core modules for a perl version.

A core module is included only when it is also released on CPAN, so that
cpanm can install a newer copy of it into the destination perl.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Final, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import MigrationError, RegistryFormatError, StaleRegistryError
from .listing import SELF_PACKAGE
from .process_utils import run_command

# Exit status used by the query program when the version is unknown.
UNKNOWN_VERSION_STATUS: Final[int] = 3

CORELIST_PROGRAM: Final[str] = """\
use strict;
use warnings;
use Module::CoreList;
my $version = $ARGV[0] + 0;
my $modules = $Module::CoreList::version{$version} or exit 3;
for my $name (keys %$modules) {
    my $upstream = $Module::CoreList::upstream{$name};
    next unless defined $upstream;
    print "$name\\n" if $upstream eq 'cpan' or $upstream eq 'first-come';
}
"""


class CoreModuleRegistry(Protocol):
    """Map a perl version string to the dual-life modules it ships."""

    def lookup(self, version: str) -> frozenset[str] | None:
        """Return the module set for *version*, or ``None`` when unknown."""
        ...


def normalize_version(version: str) -> str:
    """Return *version* in the numified form ``Module::CoreList`` keys use.

    ``5.036000`` and ``5.036`` both become ``5.036``.
    """

    version = version.strip()
    if "." in version:
        version = version.rstrip("0").rstrip(".")
    return version


class MappingCoreRegistry:
    """Registry backed by an in-memory ``{version: names}`` mapping."""

    def __init__(self, versions: Mapping[str, Iterable[str]]) -> None:
        self._versions = {normalize_version(key): frozenset(names) for key, names in versions.items()}

    def lookup(self, version: str) -> frozenset[str] | None:
        return self._versions.get(normalize_version(version))

    def __len__(self) -> int:
        return len(self._versions)


class PerlCoreListRegistry:
    """Registry answered by ``Module::CoreList`` inside a perl interpreter."""

    def __init__(self, executable: Path) -> None:
        self.executable = executable

    def lookup(self, version: str) -> frozenset[str] | None:
        completed = run_command(
            [self.executable, "-e", CORELIST_PROGRAM, "--", version],
            check=False,
            capture_output=True,
        )
        if completed.returncode == UNKNOWN_VERSION_STATUS:
            return None
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip().splitlines()
            reason = detail[-1] if detail else f"exit status {completed.returncode}"
            raise MigrationError(f"Module::CoreList query failed: {reason}")
        return frozenset(line.strip() for line in completed.stdout.splitlines() if line.strip())


class CoreRegistryFile(BaseModel):
    """On-disk registry format: ``{"versions": {"5.036000": ["Module", ...]}}``."""

    model_config = ConfigDict(extra="forbid")

    versions: dict[str, list[str]]


def load_registry_file(path: Path) -> MappingCoreRegistry:
    """Load a JSON registry file into a :class:`MappingCoreRegistry`.

    Raises:
        RegistryFormatError: If the file is unreadable or malformed.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        document = CoreRegistryFile.model_validate(payload)
    except (OSError, ValueError, ValidationError) as exc:
        raise RegistryFormatError(f"Invalid core module registry {path}: {exc}") from exc
    return MappingCoreRegistry(document.versions)


def resolve_core_modules(
    version: str,
    registry: CoreModuleRegistry,
    *,
    include_core: bool,
) -> tuple[str, ...]:
    """Return the sorted dual-life modules for *version*.

    Returns an empty tuple when *include_core* is false. An unknown version is
    an error rather than an empty result.

    Raises:
        StaleRegistryError: If *registry* has no entry for *version*.
    """

    if not include_core:
        return ()
    modules = registry.lookup(version)
    if modules is None:
        raise StaleRegistryError(version)
    return tuple(sorted(name for name in modules if name != SELF_PACKAGE))


__all__ = [
    "CORELIST_PROGRAM",
    "CoreModuleRegistry",
    "CoreRegistryFile",
    "MappingCoreRegistry",
    "PerlCoreListRegistry",
    "load_registry_file",
    "normalize_version",
    "resolve_core_modules",
]

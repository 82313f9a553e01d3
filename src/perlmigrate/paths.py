# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve user-supplied perl locations to absolute executables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import RuntimeNotFoundError

# Location of the interpreter inside a standard perl installation prefix.
PERL_BIN_SEGMENT: Final[Path] = Path("bin") / "perl"


@dataclass(frozen=True, slots=True)
class RuntimeTarget:
    """A perl installation named on the command line and its interpreter."""

    identifier: str
    executable: Path


def resolve_target(identifier: str, *, cwd: Path | None = None) -> RuntimeTarget:
    """Return the :class:`RuntimeTarget` for *identifier*.

    *identifier* may name either an installation prefix (``bin/perl`` is
    appended) or the interpreter itself. Relative values are anchored at
    *cwd*, defaulting to the current working directory.

    Raises:
        RuntimeNotFoundError: If the resolved path is missing, is a
            directory, or is not executable.
    """

    path = Path(identifier)
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    if path.is_dir():
        path = path / PERL_BIN_SEGMENT
    if not path.exists() or path.is_dir() or not os.access(path, os.X_OK):
        raise RuntimeNotFoundError(path)
    return RuntimeTarget(identifier=identifier, executable=path)


def resolve_targets(
    source: str | None,
    destination: str | None,
    *,
    cwd: Path | None = None,
) -> tuple[RuntimeTarget, RuntimeTarget]:
    """Resolve the source and destination perls, reusing one for both when needed."""

    if source is None and destination is None:
        raise ValueError("at least one of source or destination is required")
    if source is None:
        source = destination
    elif destination is None:
        destination = source
    resolved_source = resolve_target(str(source), cwd=cwd)
    if destination == source:
        return resolved_source, resolved_source
    return resolved_source, resolve_target(str(destination), cwd=cwd)


__all__ = ["PERL_BIN_SEGMENT", "RuntimeTarget", "resolve_target", "resolve_targets"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Enumerate installed modules of the source perl through ``ExtUtils::Installed``.

The source interpreter runs :data:`LISTING_PROGRAM` inline. Its argv is the
number of override paths followed by the override paths and then the extra
library paths. Override paths replace ``@INC`` for discovery; extra paths are
searched in addition to it. The first line written is ``$]``, every following
line is one module name.
"""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Collection, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import IO, Final

from .config import DEFAULT_SCRUBBED_ENV
from .process_utils import scrubbed_environment, spawn_process

# ExtUtils::Installed reports the core distribution itself under this name.
SELF_PACKAGE: Final[str] = "Perl"

LISTING_PROGRAM: Final[str] = """\
use strict;
use warnings;
use ExtUtils::Installed;
my $count = shift @ARGV;
my @override = splice @ARGV, 0, $count;
my @extra = @ARGV;
my $installed = ExtUtils::Installed->new(
    (@override ? (inc_override => \\@override) : ()),
    (@extra ? (extra_libs => \\@extra) : ()),
);
print "$]\\n";
print "$_\\n" for grep { $_ ne 'Perl' } $installed->modules;
"""


@dataclass(frozen=True, slots=True)
class SearchPaths:
    """Library directories handed to the listing program, passed verbatim."""

    override: tuple[str, ...] = ()
    extra: tuple[str, ...] = ()

    def as_arguments(self) -> list[str]:
        """Return the argv tail understood by :data:`LISTING_PROGRAM`."""

        return [str(len(self.override)), *self.override, *self.extra]


class ModuleLister:
    """Own the source perl child process and its stdout pipe."""

    def __init__(
        self,
        executable: Path,
        search_paths: SearchPaths | None = None,
        *,
        scrubbed_env: Collection[str] = DEFAULT_SCRUBBED_ENV,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.executable = executable
        self.search_paths = search_paths or SearchPaths()
        self._env = scrubbed_environment(scrubbed_env, environ)
        self._process: subprocess.Popen[str] | None = None

    def command(self) -> list[str]:
        """Return the argv used to launch the listing child."""

        return [
            str(self.executable),
            "-e",
            LISTING_PROGRAM,
            "--",
            *self.search_paths.as_arguments(),
        ]

    @property
    def environment(self) -> dict[str, str]:
        """Return a copy of the environment given to the listing child."""

        return dict(self._env)

    def start(self) -> ModuleLister:
        """Spawn the listing child; stdin is closed and stderr inherited."""

        if self._process is not None:
            raise RuntimeError("module lister already started")
        self._process = spawn_process(
            self.command(),
            env=self._env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
        )
        return self

    def __enter__(self) -> ModuleLister:
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        process = self._process
        if process is None:
            return
        if process.stdout is not None and not process.stdout.closed:
            process.stdout.close()
        if process.poll() is None:
            process.terminate()
            process.wait()

    def _stdout(self) -> IO[str]:
        if self._process is None or self._process.stdout is None:
            raise RuntimeError("module lister has not been started")
        return self._process.stdout

    def read_version(self) -> str:
        """Consume and return the version line; empty when the child wrote nothing."""

        return self._stdout().readline().strip()

    def names(self) -> Iterator[str]:
        """Yield the remaining module names until the child closes stdout."""

        for line in self._stdout():
            name = line.rstrip("\r\n")
            if not name or name == SELF_PACKAGE:
                continue
            yield name

    def wait(self) -> int:
        """Block until the child exits and return its exit status."""

        if self._process is None:
            raise RuntimeError("module lister has not been started")
        return self._process.wait()


__all__ = ["LISTING_PROGRAM", "SELF_PACKAGE", "ModuleLister", "SearchPaths"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run cpanm under the destination perl, feeding module names on stdin."""

from __future__ import annotations

import subprocess  # nosec B404
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import IO

from .listing import SELF_PACKAGE
from .process_utils import spawn_process


@dataclass(frozen=True, slots=True)
class InstallerOptions:
    """Flags passed through to cpanm."""

    notest: bool = False
    quiet: bool = False

    def as_flags(self) -> list[str]:
        flags: list[str] = []
        if self.notest:
            flags.append("--notest")
        if self.quiet:
            flags.append("--quiet")
        return flags


class InstallerRunner:
    """Own the destination perl child running the fetched cpanm script.

    The child's stdout and stderr are inherited so cpanm progress streams
    straight to the user. Its environment is left untouched, which keeps
    ``PERL5LIB`` and ``local::lib`` settings in charge of the install target.
    """

    def __init__(
        self,
        executable: Path,
        installer: Path,
        options: InstallerOptions | None = None,
    ) -> None:
        self.executable = executable
        self.installer = installer
        self.options = options or InstallerOptions()
        self._process: subprocess.Popen[str] | None = None
        self.broken_pipe = False

    def command(self) -> list[str]:
        """Return the argv used to launch cpanm."""

        return [str(self.executable), str(self.installer), *self.options.as_flags()]

    def start(self) -> InstallerRunner:
        if self._process is not None:
            raise RuntimeError("installer already started")
        self._process = spawn_process(self.command(), stdin=subprocess.PIPE)
        return self

    def __enter__(self) -> InstallerRunner:
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
        self._close_stdin()
        if process.poll() is None and exc_type is not None:
            process.terminate()
        process.wait()

    def feed(self, core_modules: Iterable[str], names: Iterable[str]) -> int:
        """Write *core_modules* then *names*, one per line, and close stdin.

        *names* is always consumed to the end, even when cpanm stops reading
        early, so the producer on the other side of it never blocks.

        Returns:
            int: Number of names written to cpanm.
        """

        if self._process is None or self._process.stdin is None:
            raise RuntimeError("installer has not been started")
        stdin = self._process.stdin
        written = 0
        for name in core_modules:
            written += self._write(stdin, name)
        for name in names:
            written += self._write(stdin, name)
        self._close_stdin()
        return written

    def _write(self, stdin: IO[str], name: str) -> int:
        if self.broken_pipe or name == SELF_PACKAGE:
            return 0
        try:
            stdin.write(f"{name}\n")
            stdin.flush()
        except BrokenPipeError:
            self.broken_pipe = True
            return 0
        return 1

    def _close_stdin(self) -> None:
        if self._process is None or self._process.stdin is None or self._process.stdin.closed:
            return
        try:
            self._process.stdin.close()
        except BrokenPipeError:
            self.broken_pipe = True

    def wait(self) -> int:
        """Block until cpanm exits and return its exit status."""

        if self._process is None:
            raise RuntimeError("installer has not been started")
        return self._process.wait()


__all__ = ["InstallerOptions", "InstallerRunner"]

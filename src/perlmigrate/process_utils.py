# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is intentional; perl interpreters are launched with
# argument lists and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Collection, Mapping, Sequence
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _normalize_args(args: Sequence[str | Path]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = (str(arg) for arg in args)
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def scrubbed_environment(
    names: Collection[str],
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return a copy of *base* (default ``os.environ``) without *names*.

    The returned mapping is meant to be passed to a single child process; the
    parent environment is left untouched.
    """

    source = os.environ if base is None else base
    return {key: value for key, value in source.items() if key not in names}


def run_command(
    args: Sequence[str | Path],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
) -> _CompletedProcess[str]:
    """Execute *args* after normalising the executable path."""
    normalized = _normalize_args(args)
    # Bandit: arguments are passed as a list without shell expansion.
    completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=capture_output,
        text=text,
        stdin=subprocess.DEVNULL,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )
    return completed


def spawn_process(
    args: Sequence[str | Path],
    *,
    env: Mapping[str, str] | None = None,
    stdin: int | IO[Any] | None = None,
    stdout: int | IO[Any] | None = None,
) -> subprocess.Popen[str]:
    """Start *args* as a text-mode child process and return its handle.

    Streams that are left as ``None`` are inherited from the parent.
    """

    normalized = _normalize_args(args)
    # Bandit: arguments are passed as a list without shell expansion.
    return subprocess.Popen(  # nosec B603
        normalized,
        env=dict(env) if env is not None else None,
        stdin=stdin,
        stdout=stdout,
        text=True,
        encoding="utf-8",
        errors="surrogateescape",
    )


__all__ = [
    "SubprocessExecutionError",
    "run_command",
    "scrubbed_environment",
    "spawn_process",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess helpers."""

from __future__ import annotations

import sys

import pytest

from perlmigrate.process_utils import (
    SubprocessExecutionError,
    run_command,
    scrubbed_environment,
)


def test_scrubbed_environment_drops_only_named_variables() -> None:
    base = {"PERL5LIB": "/x", "PATH": "/usr/bin", "PERL_MM_OPT": "INSTALL_BASE=/y"}

    assert scrubbed_environment(("PERL5LIB",), base) == {
        "PATH": "/usr/bin",
        "PERL_MM_OPT": "INSTALL_BASE=/y",
    }
    assert base["PERL5LIB"] == "/x"


def test_run_command_captures_output() -> None:
    completed = run_command([sys.executable, "-c", "print('hello')"], capture_output=True)

    assert completed.stdout.strip() == "hello"


def test_run_command_raises_on_failure_when_checked() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command([sys.executable, "-c", "import sys; sys.exit(3)"], capture_output=True)

    assert excinfo.value.returncode == 3


def test_run_command_returns_failure_when_unchecked() -> None:
    completed = run_command([sys.executable, "-c", "import sys; sys.exit(3)"], check=False)

    assert completed.returncode == 3


def test_unknown_relative_executable_is_rejected() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["definitely-not-a-real-perl-binary"])


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        run_command([])

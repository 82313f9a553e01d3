# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import stat
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from perlmigrate.console import get_console_manager

# Stand-in for a perl interpreter. It recognises the inline listing and
# Module::CoreList programs by their ``use`` lines and otherwise behaves like
# ``perl cpanm [flags]``: it records argv, env and stdin and exits with the
# configured status.
FAKE_PERL_SOURCE = """#!@PYTHON@
import json
import os
import sys

HERE = os.path.dirname(os.path.abspath(__file__))
SCRUBBED = ("PERL5LIB", "PERLLIB", "PERL5OPT")
with open(os.path.join(HERE, "fake-perl.json"), encoding="utf-8") as handle:
    CONFIG = json.load(handle)


def record(name, payload):
    path = os.path.join(HERE, name)
    entries = []
    if os.path.exists(path):
        with open(path, encoding="utf-8") as handle:
            entries = json.load(handle)
    entries.append(payload)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(entries, handle)


def environment():
    return {key: os.environ.get(key) for key in SCRUBBED}


def list_modules(args):
    record("lister-calls.json", {"argv": args, "env": environment()})
    count = int(args[0])
    override = args[1:1 + count]
    extra = args[1 + count:]
    paths = (override or CONFIG.get("inc", [])) + extra
    libraries = CONFIG.get("libraries", {})
    sys.stdout.write(CONFIG.get("version", "5.036000") + "\\n")
    for path in paths:
        for name in libraries.get(path, []):
            sys.stdout.write(name + "\\n")
    sys.stdout.flush()
    return CONFIG.get("lister_status", 0)


def corelist(args):
    record("corelist-calls.json", {"argv": args})
    modules = CONFIG.get("corelist", {}).get(args[0])
    if modules is None:
        return 3
    for name in modules:
        sys.stdout.write(name + "\\n")
    return 0


def install(args):
    data = sys.stdin.read()
    record("installer-calls.json", {"argv": args, "env": environment(), "stdin": data})
    return CONFIG.get("installer_status", 0)


def main(argv):
    if len(argv) > 2 and argv[0] == "-e":
        code, args = argv[1], argv[3:]
        if "use ExtUtils::Installed" in code:
            return list_modules(args)
        if "use Module::CoreList" in code:
            return corelist(args)
        return 99
    return install(argv)


sys.exit(main(sys.argv[1:]))
"""


@dataclass
class FakePerl:
    """Handle on a fake perl installation prefix created for a test."""

    prefix: Path
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def executable(self) -> Path:
        return self.prefix / "bin" / "perl"

    def configure(self, **values: Any) -> FakePerl:
        self.config.update(values)
        (self.prefix / "bin" / "fake-perl.json").write_text(json.dumps(self.config), encoding="utf-8")
        return self

    def _calls(self, name: str) -> list[dict[str, Any]]:
        path = self.prefix / "bin" / name
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def lister_calls(self) -> list[dict[str, Any]]:
        return self._calls("lister-calls.json")

    def corelist_calls(self) -> list[dict[str, Any]]:
        return self._calls("corelist-calls.json")

    def installer_calls(self) -> list[dict[str, Any]]:
        return self._calls("installer-calls.json")


@pytest.fixture
def make_fake_perl(tmp_path: Path) -> Callable[..., FakePerl]:
    """Return a factory creating fake perl installations under ``tmp_path``."""

    def _factory(name: str = "perl", **config: Any) -> FakePerl:
        prefix = tmp_path / name
        bin_dir = prefix / "bin"
        bin_dir.mkdir(parents=True)
        script = bin_dir / "perl"
        script.write_text(FAKE_PERL_SOURCE.replace("@PYTHON@", sys.executable), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakePerl(prefix=prefix).configure(**config)

    return _factory


@dataclass
class FakeResponse:
    """Subset of ``requests.Response`` consumed by the installer fetcher."""

    status_code: int = 200
    reason: str = "OK"
    content: bytes = b"#!/usr/bin/env perl\n# cpanm\n"


@dataclass
class DownloadStub:
    """Records ``requests.get`` calls and returns a configurable result."""

    result: FakeResponse | Exception = field(default_factory=FakeResponse)
    calls: list[tuple[str, float | None]] = field(default_factory=list)

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.calls.append((url, timeout))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def fake_download(monkeypatch: pytest.MonkeyPatch) -> DownloadStub:
    """Replace ``requests.get`` inside the fetcher with a :class:`DownloadStub`."""

    stub = DownloadStub()
    monkeypatch.setattr("perlmigrate.fetch.requests.get", stub.get)
    return stub


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    """Bind Rich consoles to the streams of the current test."""

    get_console_manager().clear()

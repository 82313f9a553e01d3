# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Download the cpanm bootstrap script into a scoped scratch directory."""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final

import requests

from .errors import InstallerHTTPError, InstallerTransportError

INSTALLER_FILENAME: Final[str] = "cpanm"
_TEMP_PREFIX: Final[str] = "perlmigrate-"


@contextmanager
def installer_workspace() -> Iterator[Path]:
    """Yield a temporary directory that is removed on every exit path."""

    with tempfile.TemporaryDirectory(prefix=_TEMP_PREFIX) as directory:
        yield Path(directory)


def fetch_installer(url: str, directory: Path, *, timeout: float) -> Path:
    """Download *url* into ``directory / "cpanm"`` and return the file path.

    Args:
        url: Location of the fatpacked cpanm script.
        directory: Scratch directory that receives the download.
        timeout: Connect/read timeout in seconds for the HTTP request.

    Returns:
        Path: Path of the downloaded installer script.

    Raises:
        InstallerTransportError: If the request failed below the HTTP layer.
        InstallerHTTPError: If the server answered with a non-2xx status.
    """

    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise InstallerTransportError(url, str(exc)) from exc
    if not 200 <= response.status_code < 300:
        raise InstallerHTTPError(url, response.status_code, response.reason or "")
    destination = directory / INSTALLER_FILENAME
    destination.write_bytes(response.content)
    return destination


__all__ = ["INSTALLER_FILENAME", "fetch_installer", "installer_workspace"]

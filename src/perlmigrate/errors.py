# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fatal error taxonomy raised by the migration pipeline."""

from __future__ import annotations

from pathlib import Path


class MigrationError(RuntimeError):
    """Base error for any condition that aborts a migration run."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable, single-line cause shown to the user.
            exit_code: Exit status the process should terminate with.
        """

        super().__init__(message)
        self.exit_code = exit_code


class RuntimeNotFoundError(MigrationError):
    """Raised when a source or destination perl cannot be located."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"perl executable not found: {path}")
        self.path = path


class InstallerTransportError(MigrationError):
    """Raised when fetching the installer fails below the HTTP layer."""

    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"Failed to download {url}: {detail}")
        self.url = url
        self.detail = detail


class InstallerHTTPError(MigrationError):
    """Raised when the installer download returns a non-success status."""

    def __init__(self, url: str, status: int, reason: str) -> None:
        super().__init__(f"Failed to download {url}: {status} {reason}".rstrip())
        self.url = url
        self.status = status
        self.reason = reason


class StaleRegistryError(MigrationError):
    """Raised when core modules are requested for a perl the registry does not know."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Unknown perl version {version}; try upgrading Module::CoreList")
        self.version = version


class RegistryFormatError(MigrationError):
    """Raised when a core-module registry file cannot be parsed."""


class ListingFailedError(MigrationError):
    """Raised when the source perl exits non-zero while listing modules."""

    def __init__(self, status: int) -> None:
        super().__init__(
            f"Failed to retrieve installed modules (exit status {status})",
            exit_code=_exit_code_for(status),
        )
        self.status = status


class InstallFailedError(MigrationError):
    """Raised when cpanm exits non-zero in the destination perl."""

    def __init__(self, status: int) -> None:
        super().__init__(
            f"Failed to install modules (exit status {status})",
            exit_code=_exit_code_for(status),
        )
        self.status = status


def _exit_code_for(status: int) -> int:
    # Negative statuses are signal terminations reported by ``subprocess``.
    return status if status > 0 else 1


__all__ = [
    "InstallFailedError",
    "InstallerHTTPError",
    "InstallerTransportError",
    "ListingFailedError",
    "MigrationError",
    "RegistryFormatError",
    "RuntimeNotFoundError",
    "StaleRegistryError",
]

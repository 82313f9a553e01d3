# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime settings for perlmigrate, sourced from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_INSTALLER_URL: Final[str] = "https://cpanmin.us"
DEFAULT_HTTP_TIMEOUT: Final[float] = 60.0
# Variables that inject library paths or options into every perl process.
DEFAULT_SCRUBBED_ENV: Final[tuple[str, ...]] = ("PERL5LIB", "PERLLIB", "PERL5OPT")

ENV_INSTALLER_URL: Final[str] = "PERLMIGRATE_INSTALLER_URL"
ENV_HTTP_TIMEOUT: Final[str] = "PERLMIGRATE_HTTP_TIMEOUT"
ENV_NO_EMOJI: Final[str] = "PERLMIGRATE_NO_EMOJI"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class MigrationSettings(BaseModel):
    """Tunables shared by the fetcher, lister and CLI."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    installer_url: str = DEFAULT_INSTALLER_URL
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    scrubbed_env: tuple[str, ...] = DEFAULT_SCRUBBED_ENV
    emoji: bool = True

    @field_validator("installer_url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("installer_url must be an http(s) URL")
        return value


def load_settings(environ: Mapping[str, str] | None = None) -> MigrationSettings:
    """Build :class:`MigrationSettings` from ``PERLMIGRATE_*`` variables.

    Args:
        environ: Environment mapping to read; defaults to ``os.environ``.

    Returns:
        MigrationSettings: Validated settings with defaults for unset values.

    Raises:
        ConfigError: If a variable holds a value the model rejects.
    """

    env = os.environ if environ is None else environ
    raw: dict[str, object] = {}
    if url := env.get(ENV_INSTALLER_URL):
        raw["installer_url"] = url
    if timeout := env.get(ENV_HTTP_TIMEOUT):
        raw["http_timeout"] = timeout
    if (no_emoji := env.get(ENV_NO_EMOJI)) is not None:
        raw["emoji"] = no_emoji.strip().lower() not in _TRUTHY
    try:
        return MigrationSettings.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(f"Invalid setting {location}: {first.get('msg', 'invalid value')}") from exc


__all__ = [
    "DEFAULT_INSTALLER_URL",
    "DEFAULT_SCRUBBED_ENV",
    "ConfigError",
    "MigrationSettings",
    "load_settings",
]

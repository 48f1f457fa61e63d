# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and TOML loading for cache rebuilds."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "catalog-cache"

DEFAULT_TIME_MODE_FEED_URL: Final[str] = (
    "https://spreadsheets.google.com/feeds/list/16lz2mCqRWxq__qnamgvlD0XwTuva4jIDW1VPWX49hzM/1/public/values?alt=json"
)
DEFAULT_TP_FEED_URL: Final[str] = (
    "https://spreadsheets.google.com/feeds/list/1G6hZW0RibjW7n72AkXZgDTHZ-LKj0usRkbAwxSPhcqA/1/public/values?alt=json"
)
_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([^}]+)\}")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def default_workers() -> int:
    """Return the manifest worker-pool size: one worker per available CPU.

    Returns:
        int: CPU count reported by the interpreter, at least one.
    """

    return max(1, os.cpu_count() or 1)


class CacheSettings(BaseModel):
    """Filesystem layout, feed endpoints and page definitions used by a rebuild."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_dir: Path
    manifest_dir: str = "JSON"
    icon_dir: str = "Icons"
    contact_info_file: str = "ContactInfo.json"
    document_dirs: tuple[str, ...] = ("HTML", "PDF")
    original_document_icons: tuple[str, ...] = ("HTML/img/html5.png", "HTML/img/pdf.png")
    extra_document_icons: tuple[str, ...] = ("HTML/img/html5-extra.png", "HTML/img/pdf-extra.png")
    tp_feed_url: str = DEFAULT_TP_FEED_URL
    time_mode_feed_url: str = DEFAULT_TIME_MODE_FEED_URL
    request_timeout: float = Field(default=10.0, gt=0)
    workers: int = Field(default_factory=default_workers, ge=1)
    displays: tuple[Any, ...] = ()
    filters: tuple[Any, ...] = ()
    selectables: tuple[Any, ...] = ()

    @model_validator(mode="after")
    def _check_document_icons(self) -> CacheSettings:
        """Ensure every document directory has both an original and an extra icon."""

        expected = len(self.document_dirs)
        if len(self.original_document_icons) != expected or len(self.extra_document_icons) != expected:
            raise ValueError(
                "original_document_icons and extra_document_icons must list one icon per document directory",
            )
        return self

    @property
    def manifest_path(self) -> Path:
        """Return the directory holding one manifest document per item."""

        return self.base_dir / self.manifest_dir

    @property
    def icon_path(self) -> Path:
        """Return the directory holding the item icons."""

        return self.base_dir / self.icon_dir

    @property
    def contact_info_path(self) -> Path:
        """Return the contact-info document path."""

        return self.base_dir / self.contact_info_file

    def document_path(self, document_dir: str) -> Path:
        """Return the absolute path of ``document_dir``."""

        return self.base_dir / document_dir

    def icon_dirs(self) -> list[str]:
        """Return the interleaved original/extra icon list, one pair per document directory.

        Returns:
            list[str]: ``[original_0, extra_0, original_1, extra_1, ...]``.
        """

        icons: list[str] = []
        for original, extra in zip(self.original_document_icons, self.extra_document_icons, strict=True):
            icons.extend((original, extra))
        return icons


def load_settings(path: Path, *, env: Mapping[str, str] | None = None) -> CacheSettings:
    """Load :class:`CacheSettings` from a TOML document.

    ``pyproject.toml`` files are read from their ``[tool.catalog-cache]`` table;
    any other file is read as a whole. ``${VAR}`` references in string values
    are expanded from ``env`` and relative ``base_dir`` values resolve against
    the configuration file's directory.

    Args:
        path: Configuration file to read.
        env: Environment used for variable expansion. Defaults to ``os.environ``.

    Returns:
        CacheSettings: Validated settings.

    Raises:
        ConfigError: If the file is missing, malformed, or fails validation.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file {path} does not exist") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc

    if path.name == PYPROJECT_FILENAME:
        data = data.get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY)
        if not isinstance(data, dict):
            raise ConfigError(f"{path} has no [{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] table")

    document = _expand_env(data, os.environ if env is None else env)
    if "base_dir" in document:
        base_dir = Path(str(document["base_dir"])).expanduser()
        document["base_dir"] = base_dir if base_dir.is_absolute() else (path.parent / base_dir).resolve()
    try:
        return CacheSettings.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration at {path}:\n{exc}") from exc


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    """Return ``value`` with ``${VAR}`` references expanded in every string."""

    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: env.get(match.group(1), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item, env) for item in value]
    return value


__all__ = [
    "CacheSettings",
    "ConfigError",
    "default_workers",
    "load_settings",
]

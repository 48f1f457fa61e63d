# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for settings loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from catalog_cache.config import CacheSettings, ConfigError, load_settings


def _write(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_standalone_file_with_relative_base_dir(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "catalog-cache.toml",
        """
        base_dir = "site"
        workers = 3
        document_dirs = ["HTML"]
        original_document_icons = ["HTML/img/html5.png"]
        extra_document_icons = ["HTML/img/html5-extra.png"]
        displays = ["name", "difficulty"]
        filters = [{ id = "defdiff", type = "slider" }]
        """,
    )

    settings = load_settings(config, env={})

    assert settings.base_dir == (tmp_path / "site").resolve()
    assert settings.manifest_path == settings.base_dir / "JSON"
    assert settings.workers == 3
    assert settings.icon_dirs() == ["HTML/img/html5.png", "HTML/img/html5-extra.png"]
    assert settings.displays == ("name", "difficulty")
    assert settings.filters == ({"id": "defdiff", "type": "slider"},)


def test_pyproject_table_and_env_expansion(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "pyproject.toml",
        """
        [project]
        name = "site"

        [tool.catalog-cache]
        base_dir = "${SITE_ROOT}"
        tp_feed_url = "https://${FEED_HOST}/tp"
        time_mode_feed_url = "https://${UNSET_HOST}/time"
        """,
    )

    settings = load_settings(config, env={"SITE_ROOT": str(tmp_path / "www"), "FEED_HOST": "feeds.test"})

    assert settings.base_dir == tmp_path / "www"
    assert settings.tp_feed_url == "https://feeds.test/tp"
    assert settings.time_mode_feed_url == "https://${UNSET_HOST}/time"


def test_pyproject_without_table_is_rejected(tmp_path: Path) -> None:
    config = _write(tmp_path / "pyproject.toml", '[project]\nname = "site"\n')
    with pytest.raises(ConfigError, match="tool.catalog-cache"):
        load_settings(config, env={})


@pytest.mark.parametrize(
    "body",
    [
        'base_dir = "."\nworkers = 0\n',
        'base_dir = "."\nunknown_key = 1\n',
        'base_dir = "."\ndocument_dirs = ["HTML"]\n',
        "workers = 2\n",
    ],
)
def test_invalid_settings_raise_config_error(tmp_path: Path, body: str) -> None:
    config = _write(tmp_path / "catalog-cache.toml", body)
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings(config, env={})


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_settings(tmp_path / "absent.toml")
    broken = _write(tmp_path / "broken.toml", "base_dir = \n")
    with pytest.raises(ConfigError, match="not valid TOML"):
        load_settings(broken)


def test_defaults(tmp_path: Path) -> None:
    settings = CacheSettings(base_dir=tmp_path)
    assert settings.document_dirs == ("HTML", "PDF")
    assert settings.contact_info_path == tmp_path / "ContactInfo.json"
    assert settings.workers >= 1
    assert settings.request_timeout == 10.0

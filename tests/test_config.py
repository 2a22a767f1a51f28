"""Tests for render configuration."""

from pathlib import Path

import pytest

from publist.config import RenderConfig
from publist.exceptions import FileOperationError, InvalidDataError


def test_defaults():
    config = RenderConfig()

    assert config.container_id == "publication-list"
    assert config.counter_id == "publication-count"
    assert config.sort_by_year is True
    assert config.group_by_year is False


def test_from_file_partial(tmp_path: Path):
    config_path = tmp_path / "publist.json"
    config_path.write_text('{"highlight": "Duan", "group_by_year": true}', encoding="utf-8")

    config = RenderConfig.from_file(config_path)

    assert config.highlight == "Duan"
    assert config.group_by_year is True
    assert config.container_id == "publication-list"


def test_from_file_wrong_type(tmp_path: Path):
    config_path = tmp_path / "publist.json"
    config_path.write_text('{"sort_by_year": "yes"}', encoding="utf-8")

    with pytest.raises(InvalidDataError):
        RenderConfig.from_file(config_path)


def test_from_file_missing(tmp_path: Path):
    with pytest.raises(FileOperationError):
        RenderConfig.from_file(tmp_path / "missing.json")

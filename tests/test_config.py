"""Tests for config file loading and merging."""

from __future__ import annotations

import json
import logging

import pytest

from testid_manager.core.config import (
    find_config_file,
    load_config_file,
    make_config,
    resolve_config,
)
from testid_manager.core.models import DEFAULT_GLOB, ManagerConfig


class TestFindConfigFile:
    def test_none_when_absent(self, tmp_path):
        assert find_config_file(tmp_path) is None

    def test_root_file_wins(self, tmp_path):
        (tmp_path / "cypress").mkdir()
        (tmp_path / "cypress" / "testid-manager.config.json").write_text("{}")
        (tmp_path / "testid-manager.config.json").write_text("{}")
        assert find_config_file(tmp_path) == tmp_path / "testid-manager.config.json"

    def test_playwright_location(self, tmp_path):
        (tmp_path / "playwright").mkdir()
        path = tmp_path / "playwright" / "testid-manager.config.json"
        path.write_text("{}")
        assert find_config_file(tmp_path) == path


class TestLoadConfigFile:
    def test_json(self, tmp_path):
        (tmp_path / "testid-manager.config.json").write_text(
            json.dumps({"baseId": "e2e-001", "glob": "e2e/**/*.ts"})
        )
        assert load_config_file(tmp_path) == {"baseId": "e2e-001", "glob": "e2e/**/*.ts"}

    def test_yaml(self, tmp_path):
        (tmp_path / "testid-manager.config.yaml").write_text(
            "baseId: T100\noverwriteExistingIds: true\n"
        )
        assert load_config_file(tmp_path) == {"baseId": "T100", "overwriteExistingIds": True}

    def test_non_mapping_ignored(self, tmp_path, caplog):
        (tmp_path / "testid-manager.config.json").write_text("[1, 2]")
        with caplog.at_level(logging.WARNING):
            assert load_config_file(tmp_path) == {}
        assert "did not contain a mapping" in caplog.text

    def test_invalid_json_raises(self, tmp_path):
        (tmp_path / "testid-manager.config.json").write_text("{not json")
        with pytest.raises(ValueError, match="not valid"):
            load_config_file(tmp_path)


class TestMakeConfig:
    def test_defaults(self):
        config = make_config({})
        assert config == ManagerConfig()
        assert config.base_id is None
        assert config.glob == DEFAULT_GLOB
        assert config.overwrite is False

    def test_file_values(self):
        config = make_config(
            {"baseId": "C001", "glob": "specs/*.js", "overwriteExistingIds": True}
        )
        assert (config.base_id, config.glob, config.overwrite) == ("C001", "specs/*.js", True)

    def test_string_overwrite_coerced(self):
        assert make_config({"overwriteExistingIds": "true"}).overwrite is True
        assert make_config({"overwriteExistingIds": "false"}).overwrite is False

    def test_cli_overrides_file(self):
        config = make_config({"baseId": "C001", "glob": "a/*.js"}, base_id="X01", glob=None)
        assert config.base_id == "X01"
        assert config.glob == "a/*.js"

    def test_false_override_is_applied(self):
        config = make_config({"overwriteExistingIds": True}, overwrite=False)
        assert config.overwrite is False

    def test_unknown_keys_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = make_config({"baseId": "C001", "startIndex": "5"})
        assert config.base_id == "C001"
        assert "startIndex" in caplog.text


class TestResolveConfig:
    def test_merges_file_and_overrides(self, tmp_path):
        (tmp_path / "testid-manager.config.json").write_text(
            json.dumps({"baseId": "e2e-001", "overwriteExistingIds": True})
        )
        config = resolve_config(tmp_path, base_id=None, glob="x/*.ts", overwrite=None)
        assert config.base_id == "e2e-001"
        assert config.glob == "x/*.ts"
        assert config.overwrite is True

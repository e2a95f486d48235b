"""Tests for prealloc.config: project configuration loading."""

import json

import pytest

from prealloc.config import CONFIG_SCHEMA, config_path, default_config, load_config
from prealloc.errors import ConfigError


# ===========================================================================
# default_config
# ===========================================================================

class TestDefaultConfig:
    def test_returns_all_keys(self):
        cfg = default_config()
        for key in CONFIG_SCHEMA:
            assert key in cfg

    def test_default_values(self):
        cfg = default_config()
        assert cfg["simple"] is True
        assert cfg["rangeloops"] is True
        assert cfg["forloops"] is False
        assert cfg["set_exit_status"] is False
        assert cfg["exclude"] == []
        assert cfg["format"] == "text"

    def test_defaults_are_independent_copies(self):
        cfg = default_config()
        cfg["exclude"].append("gen")
        assert default_config()["exclude"] == []


# ===========================================================================
# load_config
# ===========================================================================

class TestLoadConfig:
    def test_no_file_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "config.json") == default_config()

    def test_fills_missing_keys(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"forloops": True, "exclude": ["gen"]}))
        cfg = load_config(p)
        assert cfg["forloops"] is True
        assert cfg["exclude"] == ["gen"]
        # Missing keys get defaults
        assert cfg["simple"] is True

    def test_string_booleans_are_accepted(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"simple": "false"}))
        assert load_config(p)["simple"] is False

    def test_corrupted_file_raises(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("not valid json{{{")
        with pytest.raises(ConfigError, match="could not read config"):
            load_config(p)

    def test_non_object_raises(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(p)

    def test_unknown_key_raises(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"loops": True}))
        with pytest.raises(ConfigError, match="unknown config key 'loops'"):
            load_config(p)

    def test_wrong_type_raises(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"exclude": "gen"}))
        with pytest.raises(ConfigError, match="exclude expects list"):
            load_config(p)

    def test_unknown_format_raises(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"format": "xml"}))
        with pytest.raises(ConfigError, match="format must be one of"):
            load_config(p)

    def test_default_location_follows_project_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PREALLOC_ROOT", str(tmp_path))
        assert config_path() == tmp_path.resolve() / ".prealloc" / "config.json"
        p = config_path()
        p.parent.mkdir(parents=True)
        p.write_text(json.dumps({"set_exit_status": True}))
        assert load_config()["set_exit_status"] is True

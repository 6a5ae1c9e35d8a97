"""
Unit tests for settings resolution (env var > config file > default).
"""

import json
import logging

import pytest

from src.utils import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp dir and clear VISOR_* variables."""
    config_dir = tmp_path / ".visor_fullereno"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_FILE_PATH", config_dir / "config.json")
    for var in ("VISOR_API_KEY", "VISOR_MAX_UPLOAD_MB", "VISOR_UPLOAD_DIR", "VISOR_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return config_dir


def _write_config(config_dir, data):
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text(json.dumps(data), encoding="utf-8")


class TestApiKey:

    def test_no_key_anywhere(self):
        assert config.get_api_key() == (None, None)
        assert config.is_env_key_set() is False

    def test_env_takes_priority(self, isolated_config, monkeypatch):
        _write_config(isolated_config, {"api_key": "from-file"})
        monkeypatch.setenv("VISOR_API_KEY", "from-env")
        assert config.get_api_key() == ("from-env", "env")
        assert config.is_env_key_set() is True

    def test_save_and_reload(self):
        assert config.save_api_key("saved-key") is True
        assert config.get_api_key() == ("saved-key", "config")

    def test_corrupt_config_file(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.json").write_text("{not json", encoding="utf-8")
        assert config.load_config() == {}


class TestServerSettings:

    def test_defaults(self):
        settings = config.load_server_settings()
        assert settings.api_key is None
        assert settings.max_upload_bytes == 60 * 1024 * 1024
        assert settings.upload_dir == "uploads"

    def test_values_from_env_and_file(self, isolated_config, monkeypatch):
        _write_config(isolated_config, {"api_key": "k", "max_upload_mb": 5, "upload_dir": "/tmp/from-file"})
        monkeypatch.setenv("VISOR_UPLOAD_DIR", "/tmp/from-env")
        settings = config.load_server_settings()
        assert settings.api_key == "k"
        assert settings.max_upload_bytes == 5 * 1024 * 1024
        assert settings.upload_dir == "/tmp/from-env"

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_upload_size_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("VISOR_MAX_UPLOAD_MB", value)
        assert config.get_max_upload_mb() == config.DEFAULT_MAX_UPLOAD_MB


class TestLogLevel:

    def test_default_is_info(self):
        assert config.get_log_level() == logging.INFO

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("VISOR_LOG_LEVEL", "debug")
        assert config.get_log_level() == logging.DEBUG

    def test_unknown_level(self, monkeypatch):
        monkeypatch.setenv("VISOR_LOG_LEVEL", "chatty")
        assert config.get_log_level() == logging.INFO

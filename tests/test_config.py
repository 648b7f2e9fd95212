"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from toneguard.config import Config, ConfigError, ServiceConfig, load_config


class TestDefaultConfig:
    """Test default configuration values."""

    def test_default_server(self):
        config = Config()
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9100

    def test_default_service(self):
        config = Config()
        assert config.service.mode == "chat"
        assert config.service.model == "google/gemini-2.5-flash"
        assert config.service.temperature == 0.7
        assert config.service.timeout == 60.0

    def test_default_live(self):
        config = Config()
        assert config.live.debounce_ms == 300
        assert config.live.min_chars == 10

    def test_default_session_flags_off(self):
        config = Config()
        assert config.session.discard_stale_responses is False
        assert config.session.strict_severity is False

    def test_database_path_expands_user(self):
        config = Config()
        assert "~" not in str(config.database_path)

    def test_zero_timeout_disables(self):
        assert ServiceConfig(timeout_seconds=0).timeout is None

    def test_repr_masks_api_key(self):
        text = repr(ServiceConfig(api_key="sk-secret-1234"))
        assert "sk-secret" not in text
        assert "***1234" in text


class TestLoadConfig:
    """Test TOML configuration loading."""

    def test_load_missing_file_returns_defaults(self):
        config = load_config(Path("/nonexistent/toneguard.toml"))
        assert config.server.port == 9100

    def test_load_valid_toml(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text("""\
[server]
host = "0.0.0.0"
port = 8080

[service]
mode = "function"
function_url = "https://fn.example/analyze-tone"
api_key = "anon"
timeout_seconds = 15

[defaults]
language = "DE"
audience = "team"
content_medium = "chat"

[live]
debounce_ms = 500

[history]
database_path = "/tmp/tg.db"
recent_limit = 10

[session]
discard_stale_responses = true
strict_severity = true

[logging]
level = "debug"
""")
        config = load_config(toml_file)
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.service.mode == "function"
        assert config.service.function_url == "https://fn.example/analyze-tone"
        assert config.service.timeout == 15.0
        assert config.defaults.language == "DE"
        assert config.defaults.content_medium == "chat"
        assert config.live.debounce_ms == 500
        assert config.live.min_chars == 10
        assert config.history.recent_limit == 10
        assert config.database_path == Path("/tmp/tg.db")
        assert config.session.discard_stale_responses is True
        assert config.session.strict_severity is True
        assert config.logging.level == "DEBUG"

    def test_partial_toml_keeps_defaults(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text('[service]\napi_key = "k"\n')
        config = load_config(toml_file)
        assert config.service.api_key == "k"
        assert config.service.mode == "chat"
        assert config.history.recent_limit == 5

    def test_invalid_positive_int_falls_back(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text("[history]\nrecent_limit = -3\n")
        assert load_config(toml_file).history.recent_limit == 5

    def test_invalid_toml(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text("[server\nport = 1")
        with pytest.raises(ConfigError):
            load_config(toml_file)

    def test_unknown_service_mode(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text('[service]\nmode = "carrier-pigeon"\n')
        with pytest.raises(ConfigError, match="carrier-pigeon"):
            load_config(toml_file)

    def test_non_numeric_timeout(self, tmp_path: Path):
        toml_file = tmp_path / "toneguard.toml"
        toml_file.write_text('[service]\ntimeout_seconds = "soon"\n')
        with pytest.raises(ConfigError):
            load_config(toml_file)

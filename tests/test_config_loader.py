"""Tests for YAML configuration loading."""

import pytest

from a2a_planner import config_loader
from a2a_planner.config_loader import (
    load_app_config,
    resolve_env_vars,
    reset_config_cache,
)
from a2a_planner.models import AppConfig

FULL_CONFIG = """
version: "2.0"
a2a:
  base_url: ${TEST_A2A_URL:-http://fallback:3000}
  endpoint_path: /rpc
  timeout: 15
inference:
  model: ${TEST_MODEL}
  temperature: 0
orchestration:
  max_turns: 5
  max_tool_calls_per_turn: 2
  agent_name: Scout
logging:
  level: debug
operations:
  - operation: credits_balance
    description: Show balance
"""


@pytest.fixture
def write_config(tmp_path):
    def write(text: str):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        return str(path)

    return write


class TestResolveEnvVars:
    """Tests for ${VAR} interpolation."""

    def test_set_variable(self, monkeypatch):
        """Set variables are substituted."""
        monkeypatch.setenv("TEST_HOST", "example.org")
        assert resolve_env_vars("http://${TEST_HOST}/a2a") == "http://example.org/a2a"

    def test_default(self, monkeypatch):
        """Unset variables take the inline default."""
        monkeypatch.delenv("TEST_HOST", raising=False)
        assert resolve_env_vars("${TEST_HOST:-localhost}") == "localhost"

    def test_unset_without_default(self, monkeypatch):
        """Unset variables without default become empty."""
        monkeypatch.delenv("TEST_HOST", raising=False)
        assert resolve_env_vars("[${TEST_HOST}]") == "[]"

    def test_plain_string(self):
        """Strings without references are unchanged."""
        assert resolve_env_vars("no vars here") == "no vars here"


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_full_config(self, write_config, monkeypatch):
        """Every section is parsed and interpolated."""
        monkeypatch.setenv("TEST_MODEL", "local-model")
        monkeypatch.delenv("TEST_A2A_URL", raising=False)

        config = load_app_config(write_config(FULL_CONFIG))

        assert config.version == "2.0"
        assert config.a2a.base_url == "http://fallback:3000"
        assert config.a2a.endpoint_path == "/rpc"
        assert config.a2a.timeout == 15.0
        assert config.a2a.card_timeout == 10.0
        assert config.inference.model == "local-model"
        assert config.inference.temperature == 0.0
        assert config.orchestration.max_turns == 5
        assert config.orchestration.max_tool_calls_per_turn == 2
        assert config.orchestration.agent_name == "Scout"
        assert config.log_level == "DEBUG"
        assert config.operations == [
            {"operation": "credits_balance", "description": "Show balance"}
        ]

    def test_missing_sections_use_defaults(self, write_config, monkeypatch):
        """Absent sections fall back to defaults."""
        monkeypatch.delenv("A2A_BASE_URL", raising=False)
        config = load_app_config(write_config("version: '1.0'\n"))
        assert config.a2a.base_url == "http://localhost:3000"
        assert config.orchestration.max_turns == 25
        assert config.orchestration.max_tool_calls_per_turn == 10
        assert config.operations == []

    def test_cached_until_reload(self, write_config):
        """The loaded config is cached until reload=True."""
        path = write_config("version: '1.0'\n")
        first = load_app_config(path)
        assert load_app_config() is first
        assert load_app_config(path, reload=True) is not first

    def test_reset_cache(self, write_config):
        """reset_config_cache forces a fresh load."""
        path = write_config("version: '1.0'\n")
        first = load_app_config(path)
        reset_config_cache()
        assert load_app_config(path) is not first

    def test_explicit_missing_file(self, tmp_path):
        """An explicit missing path raises."""
        with pytest.raises(FileNotFoundError):
            load_app_config(str(tmp_path / "nope.yaml"))

    def test_config_path_env_missing_file(self, tmp_path, monkeypatch):
        """A missing CONFIG_PATH file raises."""
        monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "nope.yaml"))
        with pytest.raises(FileNotFoundError):
            load_app_config()

    def test_config_path_env(self, write_config, monkeypatch):
        """CONFIG_PATH selects the file to load."""
        monkeypatch.setenv("CONFIG_PATH", write_config("version: '3.1'\n"))
        assert load_app_config().version == "3.1"

    def test_default_path_missing_falls_back(self, tmp_path, monkeypatch):
        """A missing default file yields defaults."""
        monkeypatch.delenv("CONFIG_PATH", raising=False)
        monkeypatch.setattr(config_loader, "DEFAULT_CONFIG_PATH", tmp_path / "none.yaml")
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.operations == []

    def test_empty_file(self, write_config):
        """An empty config file is rejected."""
        with pytest.raises(ValueError, match="empty"):
            load_app_config(write_config(""))

    def test_non_positive_limits(self, write_config):
        """Orchestration limits must be positive."""
        with pytest.raises(ValueError):
            load_app_config(write_config("orchestration:\n  max_turns: 0\n"))

    def test_invalid_operations(self, write_config):
        """Operation entries need a name."""
        with pytest.raises(ValueError):
            load_app_config(write_config("operations:\n  - description: no name\n"))

    def test_bundled_config_loads(self, monkeypatch):
        """The shipped config/config.yaml loads."""
        monkeypatch.delenv("CONFIG_PATH", raising=False)
        config = load_app_config(str(config_loader.DEFAULT_CONFIG_PATH))
        names = [entry["operation"] for entry in config.operations]
        assert "namespace_create" in names
        assert config.orchestration.max_turns == 25

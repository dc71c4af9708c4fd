"""
Tests for config.properties parsing and HubConfig resolution.
"""

import pytest

from status_hub.config import ConfigProperties, HubConfig
from status_hub.utils.exceptions import ConfigurationError


@pytest.fixture
def properties_file(tmp_path):
    path = tmp_path / "config.properties"
    path.write_text(
        "# hub settings\n"
        "! legacy comment style\n"
        "hub.http_host = 0.0.0.0\n"
        "hub.http_port=4000\n"
        "hub.block_plugin_status: false\n"
        "hub.heartbeat_timeout_ms=20000\n"
        "HUB_TEST_PLAIN_KEY=from-file\n",
        encoding="utf-8",
    )
    yield path
    ConfigProperties.reload()


class TestConfigProperties:
    """Test the properties file reader."""

    def test_parses_both_separators_and_comments(self, properties_file):
        ConfigProperties.reload(str(properties_file))

        assert ConfigProperties.source_path() == properties_file
        assert ConfigProperties.get("hub.http_host") == "0.0.0.0"
        assert ConfigProperties.get_int("hub.http_port") == 4000
        assert ConfigProperties.get_bool("hub.block_plugin_status", default=True) is False
        assert ConfigProperties.get("! legacy comment style") is None

    def test_get_section(self, properties_file):
        ConfigProperties.reload(str(properties_file))

        section = ConfigProperties.get_section("hub")

        assert section["http_port"] == "4000"
        assert "HUB_TEST_PLAIN_KEY" not in section

    def test_load_to_env_respects_existing_vars(self, properties_file, monkeypatch):
        monkeypatch.delenv("HUB_TEST_PLAIN_KEY", raising=False)
        ConfigProperties.reload(str(properties_file))
        ConfigProperties.load_to_env()
        assert ConfigProperties.get_env("HUB_TEST_PLAIN_KEY") == "from-file"

        monkeypatch.setenv("HUB_TEST_PLAIN_KEY", "from-os")
        ConfigProperties.load_to_env()
        assert ConfigProperties.get_env("HUB_TEST_PLAIN_KEY") == "from-os"

    def test_missing_file(self, tmp_path):
        ConfigProperties.reload(str(tmp_path / "absent.properties"))

        assert ConfigProperties.source_path() is None
        assert ConfigProperties.get_int("hub.http_port", 31415) == 31415
        ConfigProperties.reload()

    def test_env_helpers(self, monkeypatch):
        monkeypatch.setenv("HUB_LOG_MAX_BYTES", "not-a-number")
        monkeypatch.setenv("HUB_ENABLE_CONSOLE_LOGGING", "yes")

        assert ConfigProperties.get_int_env("HUB_LOG_MAX_BYTES", 7) == 7
        assert ConfigProperties.get_bool_env("HUB_ENABLE_CONSOLE_LOGGING") is True
        assert ConfigProperties.get_logging_config()["max_bytes"] == 10485760


class TestHubConfig:
    """Test HubConfig defaults, file values and env overrides."""

    def test_defaults(self):
        config = HubConfig()

        assert config.http_host == "127.0.0.1"
        assert config.http_port == 31415
        assert config.block_plugin_status is True
        assert config.heartbeat_timeout_ms == 15000

    def test_from_file(self, properties_file, hub_env):
        config = HubConfig.from_properties(str(properties_file))

        assert config.http_host == "0.0.0.0"
        assert config.http_port == 4000
        assert config.block_plugin_status is False
        assert config.heartbeat_timeout_ms == 20000

    def test_env_overrides_file(self, properties_file, hub_env):
        hub_env.setenv("HUB_HTTP_PORT", "5000")
        hub_env.setenv("HUB_BLOCK_PLUGIN_STATUS", "true")

        config = HubConfig.from_properties(str(properties_file))

        assert config.http_port == 5000
        assert config.block_plugin_status is True
        assert config.http_host == "0.0.0.0"

    def test_non_integer_port(self, hub_env):
        hub_env.setenv("HUB_HTTP_PORT", "eighty")

        with pytest.raises(ConfigurationError) as exc_info:
            HubConfig.from_properties()
        assert exc_info.value.setting_name == "http_port"
        assert exc_info.value.details["actual_value"] == "eighty"

    def test_unrecognised_boolean(self, hub_env):
        hub_env.setenv("HUB_BLOCK_PLUGIN_STATUS", "maybe")

        with pytest.raises(ConfigurationError) as exc_info:
            HubConfig.from_properties()
        assert exc_info.value.setting_name == "block_plugin_status"
        assert exc_info.value.details["actual_value"] == "maybe"

    @pytest.mark.parametrize("raw, expected", [("off", False), ("NO", False), ("On", True), ("1", True)])
    def test_boolean_spellings(self, hub_env, raw, expected):
        hub_env.setenv("HUB_BLOCK_PLUGIN_STATUS", raw)

        assert HubConfig.from_properties().block_plugin_status is expected

    @pytest.mark.parametrize("kwargs", [
        {"http_port": 0},
        {"http_port": 70000},
        {"heartbeat_timeout_ms": 0},
        {"http_host": "  "},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            HubConfig(**kwargs)

    def test_to_dict(self):
        assert HubConfig(http_port=9000).to_dict() == {
            "http_host": "127.0.0.1",
            "http_port": 9000,
            "block_plugin_status": True,
            "heartbeat_timeout_ms": 15000,
        }

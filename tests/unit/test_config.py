"""Tests for BridgeConfig and env file loading."""

import os

import pytest

from wabridge.config import BridgeConfig, load_env_file


class TestBridgeConfigFromEnv:
    """Tests for BridgeConfig.from_env()."""

    @pytest.mark.core
    def test_defaults_when_environment_empty(self) -> None:
        config = BridgeConfig.from_env({})

        assert config.verify_token == ""
        assert config.api_version == "v19.0"
        assert config.port == 3001
        assert config.message_log_size == 200
        assert config.event_log_size == 300
        assert config.log_level == "INFO"

    @pytest.mark.core
    def test_reads_variables(self) -> None:
        config = BridgeConfig.from_env(
            {
                "VERIFY_TOKEN": "v",
                "WHATSAPP_ACCESS_TOKEN": "t",
                "WHATSAPP_PHONE_NUMBER_ID": "p",
                "WHATSAPP_BUSINESS_ACCOUNT_ID": "b",
                "WHATSAPP_API_VERSION": "v21.0",
                "MESSAGE_LOG_SIZE": "10",
                "LOG_LEVEL": "debug",
            }
        )

        assert (config.verify_token, config.access_token) == ("v", "t")
        assert (config.phone_number_id, config.business_account_id) == ("p", "b")
        assert config.api_version == "v21.0"
        assert config.message_log_size == 10
        assert config.log_level == "DEBUG"

    @pytest.mark.core
    def test_app_port_wins_over_port(self) -> None:
        assert BridgeConfig.from_env({"APP_PORT": "8080", "PORT": "9090"}).port == 8080
        assert BridgeConfig.from_env({"PORT": "9090"}).port == 9090

    @pytest.mark.core
    def test_configured_reports_booleans_only(self, config: BridgeConfig) -> None:
        flags = BridgeConfig(access_token="secret").configured()

        assert flags == {
            "verifyToken": False,
            "whatsappAccessToken": True,
            "phoneNumberId": False,
            "businessAccountId": False,
        }
        assert all(config.configured().values())


class TestLoadEnvFile:
    """Tests for load_env_file()."""

    @pytest.mark.core
    def test_loads_first_existing_candidate(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("WABRIDGE_TEST_VALUE", raising=False)
        env_file = tmp_path / "env"
        env_file.write_text("WABRIDGE_TEST_VALUE=from-file\n")

        loaded = load_env_file([tmp_path / ".env", env_file])

        assert loaded == env_file
        assert os.environ["WABRIDGE_TEST_VALUE"] == "from-file"
        os.environ.pop("WABRIDGE_TEST_VALUE")

    @pytest.mark.core
    def test_returns_none_without_candidates(self, tmp_path) -> None:
        assert load_env_file([tmp_path / "missing"]) is None

"""Unit tests for the app_config module."""
import os
from unittest.mock import patch, MagicMock

import pytest
import yaml

from lokalise_keys.app_config import AppConfig, load_app_config, read_api_token
from lokalise_keys.batching import MAX_KEYS_PER_REQUEST
from lokalise_keys.errors import AuthError


def write_config(tmp_path, data) -> str:
    path = tmp_path / "custom_config.yaml"
    path.write_text(yaml.dump(data), encoding="utf-8")
    os.environ["LOKALISE_KEYS_CONFIG_FILE"] = str(path)
    return str(path)


class TestAppConfig:
    """Test cases for the AppConfig dataclass."""

    def test_app_config_defaults(self):
        config = AppConfig(project_root="/test/root")

        assert config.api_base_url == "https://api.lokalise.com/api2"
        assert config.batch_size == MAX_KEYS_PER_REQUEST
        assert config.platforms == ["ios", "android", "web", "other"]
        assert config.dry_run is False


class TestLoadAppConfig:
    """Test cases for the load_app_config function."""

    def test_load_config_with_valid_yaml_file(self, tmp_path):
        write_config(tmp_path, {
            "api_base_url": "https://lokalise.test/api2",
            "batch_size": 100,
            "requests_per_second": 2,
            "platforms": ["web"],
            "dry_run": True,
            "logging": {"log_level": "DEBUG", "log_file_path": "", "log_to_console": False},
        })

        config = load_app_config()

        assert config.api_base_url == "https://lokalise.test/api2"
        assert config.batch_size == 100
        assert config.requests_per_second == 2.0
        assert config.platforms == ["web"]
        assert config.dry_run is True

    def test_missing_configured_file_uses_defaults(self, tmp_path, capsys):
        os.environ["LOKALISE_KEYS_CONFIG_FILE"] = str(tmp_path / "absent.yaml")

        with patch("lokalise_keys.app_config.setup_logger") as mock_logger:
            mock_logger.return_value = MagicMock()
            config = load_app_config()

        assert config.batch_size == MAX_KEYS_PER_REQUEST
        assert config.dry_run is False
        assert "not found" in capsys.readouterr().err

    def test_missing_default_file_is_silent(self, capsys):
        del os.environ["LOKALISE_KEYS_CONFIG_FILE"]

        with patch("lokalise_keys.app_config.setup_logger") as mock_logger:
            mock_logger.return_value = MagicMock()
            config = load_app_config()

        assert config.batch_size == MAX_KEYS_PER_REQUEST
        assert capsys.readouterr().err == ""

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path, capsys):
        path = tmp_path / "broken.yaml"
        path.write_text("batch_size: [1,\n", encoding="utf-8")
        os.environ["LOKALISE_KEYS_CONFIG_FILE"] = str(path)

        with patch("lokalise_keys.app_config.setup_logger") as mock_logger:
            mock_logger.return_value = MagicMock()
            config = load_app_config()

        assert config.batch_size == MAX_KEYS_PER_REQUEST
        assert "Invalid YAML" in capsys.readouterr().err

    def test_environment_overrides_batch_size(self, tmp_path):
        write_config(tmp_path, {"batch_size": 100, "logging": {"log_to_console": False, "log_file_path": ""}})

        with patch.dict(os.environ, {"LOKALISE_BATCH_SIZE": "25"}):
            config = load_app_config()

        assert config.batch_size == 25

    @pytest.mark.parametrize("configured, expected", [(0, 1), (-3, 1), (5000, MAX_KEYS_PER_REQUEST), ("many", MAX_KEYS_PER_REQUEST)])
    def test_batch_size_is_clamped(self, tmp_path, configured, expected):
        write_config(tmp_path, {"batch_size": configured, "logging": {"log_to_console": False, "log_file_path": ""}})

        assert load_app_config().batch_size == expected

    def test_dotenv_file_in_working_directory_is_loaded(self, tmp_path):
        (tmp_path / ".env").write_text("LOKALISE_API_TOKEN=from-dotenv\n", encoding="utf-8")

        with patch("lokalise_keys.app_config.load_dotenv") as mock_load_dotenv:
            load_app_config()

        mock_load_dotenv.assert_called_once_with(os.path.join(os.getcwd(), ".env"))

    def test_dotenv_does_not_override_existing_environment(self, tmp_path):
        (tmp_path / ".env").write_text("LOKALISE_API_TOKEN=from-dotenv\n", encoding="utf-8")

        with patch.dict(os.environ, {"LOKALISE_API_TOKEN": "from-shell"}):
            load_app_config()
            assert read_api_token() == "from-shell"

    def test_logger_configured_from_logging_section(self, tmp_path):
        write_config(tmp_path, {"logging": {"log_level": "warning", "log_file_path": "out/run.log",
                                            "log_to_console": True}})

        with patch("lokalise_keys.app_config.setup_logger") as mock_logger:
            load_app_config()

        mock_logger.assert_called_once_with("WARNING", "out/run.log", True)

    @pytest.mark.parametrize("logging_section", [None, "verbose", ["INFO"]])
    def test_unusable_logging_section_uses_default_logging(self, tmp_path, logging_section):
        write_config(tmp_path, {"logging": logging_section})

        with patch("lokalise_keys.app_config.setup_logger") as mock_logger:
            mock_logger.return_value = MagicMock()
            load_app_config()

        mock_logger.assert_called_once_with("INFO", "logs/lokalise_keys.log", True)

    @pytest.mark.parametrize("platforms, expected", [
        (None, ["ios", "android", "web", "other"]),
        ([], ["ios", "android", "web", "other"]),
        ("web", ["web"]),
        ({"web": True}, ["ios", "android", "web", "other"]),
    ])
    def test_platforms_fall_back_to_defaults(self, tmp_path, platforms, expected):
        write_config(tmp_path, {"platforms": platforms,
                                "logging": {"log_to_console": False, "log_file_path": ""}})

        assert load_app_config().platforms == expected

    def test_non_numeric_settings_fall_back_to_defaults(self, tmp_path):
        write_config(tmp_path, {"request_timeout": "soon", "requests_per_second": None,
                                "batch_size": None, "api_base_url": None,
                                "logging": {"log_to_console": False, "log_file_path": ""}})

        config = load_app_config()

        assert config.request_timeout == 30.0
        assert config.requests_per_second == 6.0
        assert config.batch_size == MAX_KEYS_PER_REQUEST
        assert config.api_base_url == "https://api.lokalise.com/api2"


class TestReadApiToken:

    def test_returns_token(self):
        with patch.dict(os.environ, {"LOKALISE_API_TOKEN": "  abc123 \n"}):
            assert read_api_token() == "abc123"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_or_blank_token_raises(self, value):
        env = {} if value is None else {"LOKALISE_API_TOKEN": value}
        with patch.dict(os.environ, env):
            with pytest.raises(AuthError, match="LOKALISE_API_TOKEN"):
                read_api_token()

"""Tests for environment configuration"""
import importlib
import logging
import pytest

from src import config
from src.exceptions import ConfigurationError
from src.gamification.xp_system import calculate_experiment_xp


@pytest.fixture
def reload_config(monkeypatch):
    """Reload src.config under the current environment, restoring it afterwards"""
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


class TestConfigLoading:
    """Test values read from the environment"""

    def test_defaults(self, monkeypatch, reload_config):
        """Test defaults when nothing is set"""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("XP_MINIMUM_AWARD", raising=False)
        monkeypatch.delenv("XP_MAXIMUM_AWARD", raising=False)

        reload_config()

        assert config.LOG_LEVEL == "INFO"
        assert config.XP_MINIMUM_AWARD == 0
        assert config.XP_MAXIMUM_AWARD is None

    def test_values_from_environment(self, monkeypatch, reload_config):
        """Test environment overrides"""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("XP_MINIMUM_AWARD", "1")
        monkeypatch.setenv("XP_MAXIMUM_AWARD", "100")

        reload_config()

        assert config.LOG_LEVEL == "DEBUG"
        assert config.XP_MINIMUM_AWARD == 1
        assert config.XP_MAXIMUM_AWARD == 100

    def test_malformed_award_falls_back_and_is_reported(self, monkeypatch, reload_config, neutral_experiment):
        """Test a non-integer award setting loads with the default and fails validation"""
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        monkeypatch.setenv("XP_MINIMUM_AWARD", "abc")
        monkeypatch.delenv("XP_MAXIMUM_AWARD", raising=False)

        reload_config()

        assert config.XP_MINIMUM_AWARD == 0
        assert config.INVALID_SETTINGS == {"XP_MINIMUM_AWARD": "abc"}

        assert calculate_experiment_xp(neutral_experiment) == 10

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "XP_MINIMUM_AWARD"
        assert exc_info.value.value == "abc"

    def test_malformed_maximum_award(self, monkeypatch, reload_config):
        """Test a non-integer ceiling is reported and leaves no ceiling"""
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        monkeypatch.delenv("XP_MINIMUM_AWARD", raising=False)
        monkeypatch.setenv("XP_MAXIMUM_AWARD", "1e3")

        reload_config()

        assert config.XP_MAXIMUM_AWARD is None
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "XP_MAXIMUM_AWARD"


class TestConfigValidation:
    """Test validate_config"""

    def test_valid_configuration(self, monkeypatch):
        """Test default configuration passes"""
        monkeypatch.setattr(config, "INVALID_SETTINGS", {})
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(config, "XP_MINIMUM_AWARD", 0)
        monkeypatch.setattr(config, "XP_MAXIMUM_AWARD", None)

        config.validate_config()

    def test_invalid_log_level(self, monkeypatch):
        """Test unknown log level is rejected"""
        monkeypatch.setattr(config, "INVALID_SETTINGS", {})
        monkeypatch.setattr(config, "LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "LOG_LEVEL"

    def test_negative_minimum_award(self, monkeypatch):
        """Test negative XP floor is rejected"""
        monkeypatch.setattr(config, "INVALID_SETTINGS", {})
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(config, "XP_MINIMUM_AWARD", -5)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "XP_MINIMUM_AWARD"

    def test_maximum_below_minimum(self, monkeypatch):
        """Test XP ceiling below the floor is rejected"""
        monkeypatch.setattr(config, "INVALID_SETTINGS", {})
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
        monkeypatch.setattr(config, "XP_MINIMUM_AWARD", 10)
        monkeypatch.setattr(config, "XP_MAXIMUM_AWARD", 5)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "XP_MAXIMUM_AWARD"


def test_configure_logging(monkeypatch):
    """Test configure_logging applies LOG_LEVEL"""
    calls = []
    monkeypatch.setattr(config, "LOG_LEVEL", "warning")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    config.configure_logging()

    assert calls[0]["level"] == logging.WARNING
    assert "%(name)s" in calls[0]["format"]

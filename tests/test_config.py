"""
Unit tests for configuration.

Settings come from STOCKBOOK_* environment variables or a .env file; the
autouse fixture in conftest clears both before every test.
"""

import pytest
from pydantic import ValidationError

from stockbook.analytics.stock import Thresholds
from stockbook.config import Settings, get_settings, reset_settings


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.stock_minimum == 10
        assert settings.stock_ideal == 50
        assert settings.stock_maximum == 100
        assert settings.inference_sample_rows == 10
        assert settings.daily_consumption == 10.0
        assert settings.movement_history_limit == 100
        assert settings.log_level == "INFO"
        assert settings.google_service_account_file is None

    def test_thresholds(self):
        assert Settings().thresholds() == Thresholds(minimum=10, ideal=50, maximum=100)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STOCKBOOK_STOCK_MINIMUM", "5")
        monkeypatch.setenv("STOCKBOOK_STOCK_MAXIMUM", "20")
        monkeypatch.setenv("STOCKBOOK_LOG_LEVEL", "debug")

        settings = Settings()
        assert settings.thresholds() == Thresholds(minimum=5, ideal=50, maximum=20)
        assert settings.log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("STOCKBOOK_DAILY_CONSUMPTION=2.5\n", encoding="utf-8")
        assert Settings().daily_consumption == 2.5

    def test_minimum_above_maximum_rejected(self):
        with pytest.raises(ValidationError, match="stock_minimum must not exceed stock_maximum"):
            Settings(stock_minimum=200, stock_maximum=100)

    @pytest.mark.parametrize("field, value", [
        ("stock_minimum", -1),
        ("inference_sample_rows", 0),
        ("daily_consumption", 0),
        ("movement_history_limit", 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(log_level="chatty")


class TestGetSettings:

    def test_cached_until_reset(self, monkeypatch):
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("STOCKBOOK_INFERENCE_SAMPLE_ROWS", "3")
        assert get_settings().inference_sample_rows == 10

        reset_settings()
        assert get_settings().inference_sample_rows == 3

"""Tests for Settings."""

import pytest
from pydantic import ValidationError

from nmeastat.config import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.staleness_seconds == 5.0
        assert settings.gsv_timeout_seconds == 2.0
        assert settings.max_line_length == 128
        assert settings.web_port == 8000
        assert settings.log_level == "WARNING"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("NMEASTAT_STALENESS_SECONDS", "2.5")
        monkeypatch.setenv("NMEASTAT_WEB_PORT", "9001")
        settings = Settings(_env_file=None)
        assert settings.staleness_seconds == 2.5
        assert settings.web_port == 9001

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("NMEASTAT_REFRESH_HZ=10\n")
        assert Settings(_env_file=env_file).refresh_hz == 10.0

    def test_rejects_non_positive_values(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, staleness_seconds=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, queue_size=-1)

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level=" info ").log_level == "INFO"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

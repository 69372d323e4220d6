"""Tests for configuration module."""

import pytest
from pydantic import ValidationError


class TestSettings:
    """Tests for Settings class."""

    def test_settings_default_values(self):
        """Test default values are set correctly."""
        from session_recorder.config import Settings

        settings = Settings()
        assert settings.sessions_dir == "./sessions"
        assert settings.auto_save is True
        assert settings.recording_enabled is True
        assert settings.capture_full_page_data is True
        assert settings.eviction_grace_seconds == 60.0
        assert settings.replay_delay_ms == 100
        assert settings.generated_tests_dir == "tests/generated"
        assert settings.default_test_timeout_ms == 30000
        assert settings.log_level == "INFO"

    def test_settings_loads_from_env(self, monkeypatch):
        """Test that settings loads from environment variables."""
        from session_recorder.config import Settings

        monkeypatch.setenv("SESSION_RECORDER_SESSIONS_DIR", "/var/lib/sessions")
        monkeypatch.setenv("SESSION_RECORDER_AUTO_SAVE", "false")
        monkeypatch.setenv("SESSION_RECORDER_REPLAY_DELAY_MS", "250")

        settings = Settings()
        assert settings.sessions_dir == "/var/lib/sessions"
        assert settings.auto_save is False
        assert settings.replay_delay_ms == 250

    def test_settings_reads_dotenv(self, tmp_path):
        """Settings pick up a .env file in the working directory."""
        from session_recorder.config import Settings

        (tmp_path / ".env").write_text(
            "SESSION_RECORDER_CAPTURE_FULL_PAGE_DATA=false\nUNRELATED_KEY=1\n",
            encoding="utf-8",
        )

        settings = Settings()
        assert settings.capture_full_page_data is False

    def test_settings_rejects_invalid_values(self, monkeypatch):
        """Non-numeric delays are a validation error."""
        from session_recorder.config import Settings

        monkeypatch.setenv("SESSION_RECORDER_REPLAY_DELAY_MS", "soon")

        with pytest.raises(ValidationError):
            Settings()


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_reflects_environment(self, monkeypatch):
        """get_settings reads the environment on every call."""
        from session_recorder.config import get_settings

        monkeypatch.setenv("SESSION_RECORDER_DEFAULT_TEST_TIMEOUT_MS", "5000")
        assert get_settings().default_test_timeout_ms == 5000


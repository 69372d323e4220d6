"""Configuration management for the session recorder."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_RECORDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    sessions_dir: str = Field("./sessions", description="Directory for persisted session files")
    auto_save: bool = Field(True, description="Rewrite the session file after every recorded action")

    # Capture policy
    recording_enabled: bool = Field(True, description="Record tool invocations into sessions")
    capture_full_page_data: bool = Field(
        True,
        description="Keep data-bearing tool results verbatim instead of truncating them"
    )
    eviction_grace_seconds: float = Field(
        60.0,
        description="How long a closed session stays in memory for export/replay"
    )

    # Replay
    replay_delay_ms: int = Field(100, description="Pause between replayed actions")

    # Test generation
    generated_tests_dir: str = Field("tests/generated", description="Default output directory for generated tests")
    default_test_timeout_ms: int = Field(30000, description="Timeout written into generated tests")

    # Logging
    log_level: str = Field("INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(False, description="Render logs as JSON")


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()

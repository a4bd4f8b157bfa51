"""Runtime settings.

Values come from, in increasing priority: defaults below, a ``.env`` file in
the working directory, ``NMEASTAT_*`` environment variables, and finally the
command line options that override them.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["LogLevel", "Settings"]

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """nmeastat configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NMEASTAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Renderers
    staleness_seconds: float = Field(default=5.0, gt=0)
    refresh_hz: float = Field(default=4.0, gt=0)

    # Ingestion
    max_line_length: int = Field(default=128, gt=0)
    queue_size: int = Field(default=1024, gt=0)

    # Aggregation
    gsv_timeout_seconds: float = Field(default=2.0, gt=0)
    publish_interval_seconds: float = Field(default=1.0, gt=0)
    max_pending_satellite_groups: int = Field(default=8, gt=0)

    # Web exporter
    web_host: str = "127.0.0.1"
    web_port: int = Field(default=8000, gt=0, lt=65536)

    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

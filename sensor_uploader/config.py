"""Configuration management for the sensor log uploader."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import LogFileSet

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """Uploader configuration derived from environment variables."""

    collector_base_url: HttpUrl = Field(..., alias="COLLECTOR_BASE_URL")
    collector_api_key: str = Field(..., alias="COLLECTOR_API_KEY")
    collector_timeout: float = Field(30.0, alias="COLLECTOR_TIMEOUT", gt=0)

    dns_log_path: Path | None = Field(None, alias="DNS_LOG_PATH")
    conn_log_path: Path = Field(..., alias="CONN_LOG_PATH")

    upload_retry_count: int = Field(3, alias="UPLOAD_RETRY_COUNT", ge=1)
    upload_retry_delay: float = Field(5.0, alias="UPLOAD_RETRY_DELAY", ge=0)

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("dns_log_path", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("collector_api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("COLLECTOR_API_KEY must not be empty.")
        return stripped

    @property
    def upload_endpoint(self) -> str:
        return f"{str(self.collector_base_url).rstrip('/')}/api/logs/upload"

    def log_files(
        self, dns_path: Path | None = None, conn_path: Path | None = None
    ) -> LogFileSet:
        """Resolve the file set, letting explicit paths override the environment."""
        return LogFileSet(
            dns_path=dns_path or self.dns_log_path,
            conn_path=conn_path or self.conn_log_path,
        )

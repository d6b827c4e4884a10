"""Application configuration loaded from environment variables."""

from __future__ import annotations

from datetime import tzinfo
from pathlib import Path
from typing import Literal, Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "mindscribe.json"


class Settings(BaseSettings):
    """Application settings loaded from .env file and MINDSCRIBE_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MINDSCRIBE_",
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["memory", "json", "redis"] = "json"
    data_path: Path = DEFAULT_DATA_PATH
    redis_url: str = "redis://localhost:6379"
    storage_prefix: str = "mindscribe_"
    storage_quota_mb: float = 5.0
    seed_samples: bool = True

    # Local time used for "today" / day windows; None means the host zone
    timezone: Optional[str] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    @property
    def quota_bytes(self) -> int:
        """Storage quota in bytes (0 disables the check)."""
        return int(self.storage_quota_mb * 1024 * 1024)

    @property
    def tz(self) -> Optional[tzinfo]:
        """Resolved timezone, or None for the host's local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


settings = Settings()

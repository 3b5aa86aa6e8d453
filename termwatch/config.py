"""
Runtime configuration, read from the environment (and .env when present).

Google Calendar sync is enabled only when both service-account variables
are set; TIMEZONE decides where a "local day" starts for date queries.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Every setting maps to an upper-case environment variable of the same name."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Termwatch Legal Reminders API"
    debug: bool = False
    frontend_url: str = "*"

    # "Local day" for the today query and event date filters (IANA zone name)
    timezone: str = "UTC"

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "termwatch"

    # Uploaded files live on local disk under upload_dir
    upload_dir: str = "uploads"
    max_upload_size_mb: int = 10

    # Google Calendar - service account credentials; both must be set to enable sync
    google_client_email: Optional[str] = None
    google_private_key: Optional[str] = None
    google_calendar_id: str = "primary"

    @field_validator("google_client_email", "google_private_key", mode="before")
    @classmethod
    def strip_credentials(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return v
        return v.strip() or None

    @field_validator("google_private_key", mode="after")
    @classmethod
    def expand_key_newlines(cls, v: Optional[str]) -> Optional[str]:
        # Keys pasted into .env usually carry literal "\n" sequences
        if v is None:
            return v
        return v.replace("\\n", "\n")

    @property
    def calendar_configured(self) -> bool:
        return bool(self.google_client_email and self.google_private_key)


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process; tests call get_settings.cache_clear()."""
    return Settings()

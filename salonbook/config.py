# salonbook/config.py

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./salonbook.db"
    database_echo: bool = False  # set to True to see SQL

    # Tokens issued by the external auth layer
    secret_key: str = "change-me-later"
    algorithm: str = "HS256"

    # Scheduling
    slot_interval_minutes: int = 30
    availability_days_ahead: int = 30
    default_search_duration: int = 60

    # IANA name, e.g. "Europe/Sarajevo". None means server local time.
    timezone: Optional[str] = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("slot_interval_minutes", "availability_days_ahead", "default_search_duration")
    @classmethod
    def must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number of minutes/days")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()

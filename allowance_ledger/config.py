"""Configuration management using Pydantic Settings"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./allowance_ledger.db"
    account_key: str = "default"

    # Service
    service_name: str = "allowance-ledger"
    log_level: str = "INFO"
    timezone: Optional[str] = None  # IANA name; unset = host local time

    # First-run account defaults
    default_account_holder: str = "My"
    default_start_date: date = date(2024, 1, 1)
    default_allowance: Decimal = Decimal("5.0")
    default_interest_rate: Decimal = Decimal("1.0")

    # Read-path schedule extension cooldown (0 = extend on every read)
    schedule_cooldown_seconds: float = 0.0

    # Bearer token required for edits; unset = edits are open
    operator_token: Optional[str] = None


settings = Settings()


def get_settings() -> Settings:
    """Dependency hook for the active settings"""
    return settings

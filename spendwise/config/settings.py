"""
Configuration Management for Spendwise

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. The ledger core
functions never read settings themselves; the orchestrator passes the
values they need (daily limit, reference date) as plain arguments.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Defaults for the ledger and its dashboard."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    daily_limit: Decimal = Field(
        default=Decimal("1000"),
        ge=0,
        description="Daily spending limit used when no preferences are stored"
    )
    currency: str = Field(
        default="₹",
        description="Currency symbol shown next to amounts"
    )
    language: str = Field(
        default="en",
        pattern="^(en|hi)$",
        description="Interface language"
    )


class StorageSettings(BaseSettings):
    """Local file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_path: str = Field(
        default="spendwise_data_v1.json",
        description="Path to the JSON file holding the expense collection"
    )
    preferences_path: str = Field(
        default="spendwise_settings_v1.json",
        description="Path to the JSON file holding user preferences"
    )
    audit_path: str = Field(
        default="spendwise_audit.jsonl",
        description="Path to the append-only audit log"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render logs as JSON (False for console output)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()

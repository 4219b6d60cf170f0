"""
Configuration Management for My Wallet

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Thresholds the assistant reasons with, the storage location and the demo
credentials are all visible in one place and validated at startup.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistent store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MYWALLET_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(json_file|memory)$",
        description="Which key-value store to use"
    )
    data_file: Path = Field(
        default=Path("data/wallet_state.json"),
        description="Location of the JSON document used by the json_file backend"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed disk write is attempted"
    )


class AssistantSettings(BaseSettings):
    """Scripted assistant configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MYWALLET_ASSISTANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    reply_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        le=10.0,
        description="Simulated 'typing' delay before a reply is shown"
    )
    high_balance_threshold: Decimal = Field(
        default=Decimal("20000000"),
        gt=0,
        description="Balance above which the assistant suggests investing"
    )
    spending_ratio_threshold: Decimal = Field(
        default=Decimal("0.4"),
        ge=0,
        le=1,
        description="Share of balance above which spending counts as high"
    )


class AuthSettings(BaseSettings):
    """Local authentication configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MYWALLET_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    demo_email: str = Field(
        default="user@example.com",
        description="Email accepted by the local login"
    )
    demo_password: SecretStr = Field(
        default=SecretStr("password123"),
        description="Password accepted by the local login"
    )
    min_password_length: int = Field(
        default=6,
        ge=1,
        le=128,
        description="Minimum password length at registration"
    )

    @field_validator('demo_email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level"
    )

    # Display
    currency_code: str = Field(
        default="UGX",
        min_length=1,
        max_length=5,
        description="Currency prefix used when rendering amounts"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def assistant(self) -> AssistantSettings:
        return AssistantSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups load cleanly.

    Returns a dict of {group_name: is_valid} plus {group_name}_error
    entries for the groups that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "assistant", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

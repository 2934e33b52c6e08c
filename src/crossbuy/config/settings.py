# src/crossbuy/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or an optional .env file.

Files that USE this module:
- crossbuy.app (loads settings for wiring and logging)
- crossbuy.adapters.providers.exchangerate_host (API URL, key and timeout)
- crossbuy.application.* (currencies, cache TTL, markup, degraded rate)

Files that this module USES:
- crossbuy.shared.validators (currency code validation)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from decimal import Decimal
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from crossbuy.shared.validators import validate_currency_code


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    
    # --- Currencies ---
    base_currency: str = Field(default="CNY", alias="BASE_CURRENCY")
    default_currency: str = Field(default="RUB", alias="DEFAULT_CURRENCY")
    
    # --- External rate API ---
    currency_api_url: str = Field(
        default="https://api.exchangerate.host/convert", alias="CURRENCY_API_URL"
    )
    currency_api_key: str = Field(default="", alias="CURRENCY_API_KEY")
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    
    # --- Pricing ---
    rate_cache_minutes: int = Field(default=5, alias="RATE_CACHE_MINUTES", ge=1, le=1440)
    default_markup: Decimal = Field(default=Decimal("1.05"), alias="DEFAULT_MARKUP", ge=1)
    degraded_rate: Decimal = Field(default=Decimal("13"), alias="DEGRADED_RATE", gt=0)
    
    # --- Activity recording ---
    activity_workers: int = Field(default=2, alias="ACTIVITY_WORKERS", ge=1, le=32)
    
    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="CROSSBUY_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")
    
    @property
    def rate_cache_ttl_ms(self) -> int:
        """CachedRate time-to-live in milliseconds."""
        return self.rate_cache_minutes * 60 * 1000
    
    @field_validator("base_currency", "default_currency", mode="before")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Normalize and validate currency codes."""
        v = str(v).strip().upper()
        if not validate_currency_code(v):
            raise ValueError("Currency codes must be three letters")
        return v
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return v


# Global settings instance
settings = Settings()

"""
Sales Reporting Engine
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional, List
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """PostgreSQL Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="myshop", alias="database", description="Database name")
    user: str = Field(default="myshop", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Database URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise builds one for asyncpg"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class BusinessSettings(BaseSettings):
    """
    Business rules used by the reporting engine.

    The platform fee rate is read through a fresh instance on every request
    (see ``current_platform_fee_rate``) so that changes to the environment are
    picked up without restarting the service.
    """

    model_config = SettingsConfigDict(env_prefix="BUSINESS_")

    platform_fee_rate: Decimal = Field(default=Decimal("0.10"), description="Fraction of GMV retained by the platform")
    low_stock_threshold: int = Field(default=10, description="Stock level at or below which a product is low on stock")
    dashboard_list_size: int = Field(default=5, description="Length of dashboard lists (low stock, top selling, recent)")
    top_agents_limit: int = Field(default=10, description="Sales agents listed in composite reports")
    top_products_limit: int = Field(default=10, description="Products listed in agent reports")
    default_report_days: int = Field(default=7, description="Default composite report window in days")
    max_page_size: int = Field(default=100, description="Largest allowed product summary page")

    @field_validator("platform_fee_rate")
    @classmethod
    def validate_fee_rate(cls, v: Decimal) -> Decimal:
        """Validate the fee rate is a fraction"""
        if v < 0 or v > 1:
            raise ValueError("Platform fee rate must be between 0 and 1")
        return v


class SecuritySettings(BaseSettings):
    """Security Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="sales-reporting", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    business: BusinessSettings = Field(default_factory=BusinessSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def current_platform_fee_rate() -> Decimal:
    """
    Read the platform fee rate for the current request.

    Bypasses the settings cache on purpose: each call builds a new
    ``BusinessSettings`` from the environment.
    """
    return BusinessSettings().platform_fee_rate

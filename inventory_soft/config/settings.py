"""
Inventory Soft
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
and an optional ``.env`` file, validated once and cached for the process.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Record store database configuration"""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///./inventory_soft.sqlite3",
        description="SQLAlchemy async database URL (asyncpg or aiosqlite)",
    )
    echo: bool = Field(default=False, description="Echo SQL queries")
    create_tables: bool = Field(default=True, description="Create missing tables on startup")

    @property
    def is_sqlite(self) -> bool:
        """Whether the store runs on SQLite"""
        return self.url.startswith("sqlite")


class SecuritySettings(BaseSettings):
    """Authentication and session configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    session_ttl_hours: int = Field(default=24, alias="SESSION_TTL_HOURS", description="Absolute session lifetime")
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS", description="bcrypt cost factor")
    min_password_length: int = Field(default=6, alias="MIN_PASSWORD_LENGTH", description="Minimum password length")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_rounds(cls, v: int) -> int:
        """bcrypt accepts cost factors from 4 to 31"""
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class ReportSettings(BaseSettings):
    """PDF report configuration"""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    company_name: str = Field(default="Inventory Soft", description="Title shown on reports")
    listing_limit: int = Field(default=10, ge=1, description="Rows listed per section before '+N more'")


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
    app_name: str = Field(default="inventory-soft", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

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

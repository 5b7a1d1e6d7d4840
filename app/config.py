"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from datetime import time
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="FoodSense", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="sqlite:///./foodsense.db",
        description="SQLAlchemy connection URL for the product store",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=5, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Mail transport settings
    email_service: str = Field(
        default="gmail", description="Well-known mail service name (gmail, outlook, ...)"
    )
    email_user: Optional[str] = Field(default=None, description="Mail account user")
    email_password: Optional[str] = Field(
        default=None, description="Mail account password or app password"
    )
    email_from: Optional[str] = Field(
        default=None, description="Sender address, defaults to email_user"
    )
    smtp_host: Optional[str] = Field(
        default=None, description="Explicit SMTP host, overrides email_service"
    )
    smtp_port: Optional[int] = Field(
        default=None, ge=1, le=65535, description="Explicit SMTP port"
    )
    smtp_timeout: float = Field(
        default=30.0, gt=0, description="SMTP connection timeout in seconds"
    )

    # Expiry notifications
    notification_email: Optional[str] = Field(
        default=None, description="Operator address receiving the daily digest"
    )
    notification_window_days: int = Field(
        default=7, ge=1, description="Days before expiry a product becomes eligible"
    )
    notification_time: str = Field(
        default="09:00", description="Daily trigger time (HH:MM, 24h)"
    )
    scheduler_enabled: bool = Field(
        default=True, description="Start the daily expiry check with the app"
    )
    scheduler_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for the daily trigger and today's date (defaults to local)",
    )
    digest_date_format: str = Field(
        default="%Y-%m-%d", description="strftime format for expiry dates in digests"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="FoodSense API", description="API documentation title"
    )
    api_description: str = Field(
        default="Product expiry tracking with daily email digests",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("notification_time")
    @classmethod
    def validate_notification_time(cls, v: str) -> str:
        """Require a HH:MM wall-clock time"""
        try:
            hour, minute = v.strip().split(":")
            time(int(hour), int(minute))
        except ValueError:
            raise ValueError(f"notification_time must be HH:MM, got {v!r}")
        return v.strip()

    @field_validator("scheduler_timezone")
    @classmethod
    def validate_scheduler_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Require a known IANA zone name; blank means host local time"""
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown scheduler_timezone {v!r}")
        return v.strip()

    @property
    def notification_trigger(self) -> time:
        """Daily trigger time as a datetime.time"""
        hour, minute = self.notification_time.split(":")
        return time(int(hour), int(minute))

    @property
    def sender_address(self) -> Optional[str]:
        return self.email_from or self.email_user

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()

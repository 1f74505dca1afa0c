"""
RNBA Admin Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_EVENT_ID

# Load environment variables from .env file
load_dotenv()

PLACEHOLDER_SUPABASE_URL = "https://your-project.supabase.co"
PLACEHOLDER_SUPABASE_KEY = "your-anon-key"


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )
    PREVIEW_MODE: bool = Field(
        default=False,
        description="Serve fixed demo data without touching cache or backend",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(
        default="console", description="Log renderer: console or json"
    )

    # Local cache configuration
    CACHE_DIR: str = Field(
        default="~/.rnba_admin/cache",
        description="Application-private directory for persisted cache files",
    )
    SESSION_CACHE_MAX_ENTRIES: int = Field(
        default=256, ge=1, le=100000, description="In-memory cache entry bound"
    )
    DASHBOARD_CACHE_TTL_SECONDS: int = Field(
        default=300, ge=1, le=86400, description="Dashboard stats freshness window"
    )
    REGISTRATIONS_CACHE_TTL_SECONDS: int = Field(
        default=1800,
        ge=1,
        le=86400,
        description="Registration list freshness window",
    )
    VISITOR_DATA_CACHE_TTL_SECONDS: int = Field(
        default=300, ge=1, le=86400, description="Visitor list freshness window"
    )
    REFERENCE_DATA_CACHE_TTL_SECONDS: int = Field(
        default=86400,
        ge=1,
        le=86400 * 30,
        description="Visit type / food type lookup freshness window",
    )

    # Backend configuration
    SUPABASE_URL: str = Field(
        default=PLACEHOLDER_SUPABASE_URL, description="Supabase project URL"
    )
    SUPABASE_KEY: str = Field(
        default=PLACEHOLDER_SUPABASE_KEY, description="Supabase anonymous key"
    )
    SUPABASE_SCHEMA: str = Field(
        default="test_schema", description="Database schema exposed over REST"
    )
    BACKEND_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, le=300, description="Backend request timeout"
    )
    BACKEND_MAX_RETRIES: int = Field(
        default=3, ge=1, le=10, description="Attempts for idempotent backend reads"
    )
    BACKEND_RETRY_BACKOFF_SECONDS: float = Field(
        default=0.5, ge=0, le=30, description="Exponential backoff multiplier"
    )

    # Event configuration
    DEFAULT_EVENT_ID: int = Field(
        default=DEFAULT_EVENT_ID, ge=0, description="Event used for registrations"
    )
    EVENT_TIMEZONE: str = Field(
        default="UTC", description="Timezone defining the start of 'today'"
    )

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log renderer."""
        allowed = ["console", "json"]
        if v.lower() not in allowed:
            raise ValueError(f"LOG_FORMAT must be one of: {allowed}")
        return v.lower()

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_supabase_url(cls, v):
        """Validate backend URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("EVENT_TIMEZONE")
    @classmethod
    def validate_event_timezone(cls, v):
        """Validate timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown EVENT_TIMEZONE: {v}") from e
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def is_configured(self) -> bool:
        """Check if backend credentials were replaced with real values."""
        return (
            "your-project" not in self.SUPABASE_URL
            and "your-anon-key" not in self.SUPABASE_KEY
        )

    @property
    def cache_dir(self) -> Path:
        """Persisted cache root with the user directory expanded."""
        return Path(self.CACHE_DIR).expanduser()

    @property
    def event_timezone(self) -> ZoneInfo:
        """Timezone used for day boundaries."""
        return ZoneInfo(self.EVENT_TIMEZONE)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Message Inbox Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    CACHE_GLOB_CHARACTERS,
    CACHE_NAMESPACE,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_PAGE_SIZE,
)

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )
    SERVICE_NAME: str = Field(
        default="message-inbox", description="Service name used in log events"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Redis configuration
    REDIS_URL: str = Field(
        default="redis://localhost:6379", description="Redis connection URL"
    )
    REDIS_MAX_CONNECTIONS: int = Field(
        default=10, ge=1, le=50, description="Redis connection pool size"
    )
    REDIS_CONNECTION_TIMEOUT: float = Field(
        default=5.0, gt=0, description="Redis socket connect timeout in seconds"
    )
    REDIS_OPERATION_TIMEOUT: float = Field(
        default=2.0, gt=0, description="Timeout applied to every cache store call"
    )
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(
        default=30, ge=0, description="Idle connection health check interval"
    )
    REDIS_SCAN_COUNT: int = Field(
        default=100, ge=1, le=10000, description="SCAN batch size hint"
    )

    # Cache configuration
    CACHE_NAMESPACE: str = Field(
        default=CACHE_NAMESPACE, description="Prefix of every inbox cache key"
    )
    CACHE_DEFAULT_TTL_SECONDS: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        ge=1,
        le=86400 * 365,
        description="TTL for pages written after a cache miss",
    )

    # Inbox configuration
    INBOX_DEFAULT_PAGE_SIZE: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=1000,
        description="Page size used when the caller gives no pagination",
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

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL scheme."""
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("REDIS_URL must be a redis:// or rediss:// URL")
        return v

    @field_validator("CACHE_NAMESPACE")
    @classmethod
    def validate_cache_namespace(cls, v):
        """Namespace is embedded in keys and in the invalidation pattern."""
        if not v:
            raise ValueError("CACHE_NAMESPACE cannot be empty")
        if any(char.isspace() for char in v):
            raise ValueError("CACHE_NAMESPACE cannot contain whitespace")
        if any(char in CACHE_GLOB_CHARACTERS for char in v):
            raise ValueError(
                f"CACHE_NAMESPACE cannot contain glob characters ({CACHE_GLOB_CHARACTERS})"
            )
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

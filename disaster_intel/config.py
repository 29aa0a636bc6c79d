"""disaster-intel configuration module.

This module provides centralized configuration management using Pydantic for
validation of environment variables. Provider credentials are optional: a
missing key switches the matching service to its documented fallback path.
"""

import os
from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists
load_dotenv()


class LogLevel(str, Enum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    """Possible environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class SupabaseConfig(BaseModel):
    """Durable cache store settings."""

    url: str | None = Field(None, description="Supabase project URL")
    key: str | None = Field(None, description="Supabase API key")
    cache_table: str = Field("cache", description="Table holding cache entries")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)


class CacheConfig(BaseModel):
    """Cache behaviour settings."""

    ttl_hours: float = Field(1.0, gt=0, description="Default cache TTL in hours")
    coalesce_requests: bool = Field(
        False, description="Share one upstream call between concurrent identical lookups"
    )
    cleanup_interval_seconds: int = Field(
        3600, gt=0, description="Interval between expired-entry sweeps"
    )


class GeminiConfig(BaseModel):
    """Generative text and vision provider settings."""

    api_key: str | None = Field(None, description="Gemini API key")
    base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL",
    )
    text_model: str = Field("gemini-1.5-flash", description="Model used for location extraction")
    vision_model: str = Field("gemini-1.5-flash", description="Model used for image verification")
    request_timeout: float = Field(30.0, gt=0, description="Timeout for model requests in seconds")

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: str | None) -> str | None:
        """Treat an empty string in the environment as an absent key."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class GeocodingConfig(BaseModel):
    """Geocoding provider settings."""

    base_url: str = Field(
        "https://nominatim.openstreetmap.org/search", description="Nominatim search endpoint"
    )
    user_agent: str = Field("DisasterResponsePlatform/1.0", description="User-Agent header")
    request_timeout: float = Field(10.0, gt=0, description="Timeout for geocoding requests")


class SocialFeedConfig(BaseModel):
    """Social feed provider settings."""

    bearer_token: str | None = Field(None, description="Twitter API bearer token")
    base_url: str = Field("https://api.twitter.com/2", description="Twitter API base URL")
    max_results: int = Field(20, ge=10, le=100, description="Posts requested per search")
    request_timeout: float = Field(15.0, gt=0, description="Timeout for feed requests")

    @field_validator("bearer_token", mode="before")
    @classmethod
    def blank_token_is_missing(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: str = Field("json", description="Log format (json or text)")
    file: str | None = Field(None, description="Log file path")
    rotation_size: int = Field(10485760, gt=0, description="Log rotation size in bytes")
    rotation_count: int = Field(5, ge=0, description="Number of rotated logs to keep")
    daily_rotation: bool = Field(False, description="Enable daily log rotation")


class Settings(BaseSettings):
    """Main configuration class for disaster-intel."""

    # Application metadata
    app_name: str = Field("disaster-intel", description="Application name")
    environment: Environment = Field(Environment.DEVELOPMENT, description="Deployment environment")
    app_version: str = Field("0.1.0", description="Application version")

    # Component configurations
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    social: SocialFeedConfig = Field(default_factory=SocialFeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def build_config(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Pre-process raw values to inject nested configuration.

        Args:
            values: Raw configuration values to process

        Returns:
            dict: Processed configuration with nested values
        """
        result = dict(values)
        for name in ("supabase", "cache", "gemini", "geocoding", "social", "logging"):
            section = result.setdefault(name, {})
            if isinstance(section, BaseModel):
                result[name] = section.model_dump()

        # Durable cache store
        result["supabase"].setdefault("url", os.getenv("SUPABASE_URL"))
        result["supabase"].setdefault(
            "key", os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        )
        result["supabase"].setdefault("cache_table", os.getenv("CACHE_TABLE", "cache"))

        # Cache behaviour
        result["cache"].setdefault("ttl_hours", os.getenv("CACHE_TTL_HOURS", "1"))
        result["cache"].setdefault(
            "coalesce_requests", os.getenv("CACHE_COALESCE_REQUESTS", "false").lower() == "true"
        )
        result["cache"].setdefault(
            "cleanup_interval_seconds", os.getenv("CACHE_CLEANUP_INTERVAL", "3600")
        )

        # Generative text / vision provider
        result["gemini"].setdefault("api_key", os.getenv("GEMINI_API_KEY"))
        if os.getenv("GEMINI_BASE_URL"):
            result["gemini"].setdefault("base_url", os.getenv("GEMINI_BASE_URL"))
        result["gemini"].setdefault(
            "text_model", os.getenv("GEMINI_TEXT_MODEL", "gemini-1.5-flash")
        )
        result["gemini"].setdefault(
            "vision_model", os.getenv("GEMINI_VISION_MODEL", "gemini-1.5-flash")
        )
        result["gemini"].setdefault("request_timeout", os.getenv("GEMINI_TIMEOUT", "30"))

        # Geocoding provider
        if os.getenv("GEOCODING_URL"):
            result["geocoding"].setdefault("base_url", os.getenv("GEOCODING_URL"))
        result["geocoding"].setdefault(
            "user_agent", os.getenv("GEOCODING_USER_AGENT", "DisasterResponsePlatform/1.0")
        )
        result["geocoding"].setdefault("request_timeout", os.getenv("GEOCODING_TIMEOUT", "10"))

        # Social feed provider
        result["social"].setdefault("bearer_token", os.getenv("TWITTER_BEARER_TOKEN"))
        if os.getenv("TWITTER_BASE_URL"):
            result["social"].setdefault("base_url", os.getenv("TWITTER_BASE_URL"))
        result["social"].setdefault("max_results", os.getenv("SOCIAL_MAX_RESULTS", "20"))
        result["social"].setdefault("request_timeout", os.getenv("SOCIAL_TIMEOUT", "15"))

        # Logging
        result["logging"].setdefault("level", os.getenv("LOG_LEVEL", "INFO").upper())
        result["logging"].setdefault("format", os.getenv("LOG_FORMAT", "json"))
        result["logging"].setdefault("file", os.getenv("LOG_FILE"))
        result["logging"].setdefault("rotation_size", os.getenv("LOG_ROTATION_SIZE", "10485760"))
        result["logging"].setdefault("rotation_count", os.getenv("LOG_ROTATION_COUNT", "5"))
        result["logging"].setdefault(
            "daily_rotation", os.getenv("LOG_DAILY_ROTATION", "false").lower() == "true"
        )

        # Application metadata
        result.setdefault("app_name", os.getenv("APP_NAME", "disaster-intel"))
        result.setdefault("environment", os.getenv("ENVIRONMENT", "development"))
        result.setdefault("app_version", os.getenv("APP_VERSION", "0.1.0"))

        return result


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings, creating them on first use.

    Returns:
        Settings: The application settings.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

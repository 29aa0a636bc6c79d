import pytest
from pydantic import ValidationError

from disaster_intel.config import LogLevel, Settings

ENV_VARS = [
    "SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_ANON_KEY", "CACHE_TABLE",
    "CACHE_TTL_HOURS", "CACHE_COALESCE_REQUESTS", "CACHE_CLEANUP_INTERVAL",
    "GEMINI_API_KEY", "GEMINI_BASE_URL", "GEMINI_TEXT_MODEL", "GEMINI_VISION_MODEL",
    "GEMINI_TIMEOUT", "GEOCODING_URL", "GEOCODING_USER_AGENT", "GEOCODING_TIMEOUT",
    "TWITTER_BEARER_TOKEN", "TWITTER_BASE_URL", "SOCIAL_MAX_RESULTS", "SOCIAL_TIMEOUT",
    "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.gemini.api_key is None
    assert settings.social.bearer_token is None
    assert not settings.supabase.configured
    assert settings.supabase.cache_table == "cache"
    assert settings.cache.ttl_hours == 1.0
    assert settings.cache.coalesce_requests is False
    assert settings.geocoding.user_agent == "DisasterResponsePlatform/1.0"
    assert settings.social.max_results == 20
    assert settings.logging.level == LogLevel.INFO


def test_environment_overrides(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "gem-key")
    clean_env.setenv("SUPABASE_URL", "https://project.supabase.co")
    clean_env.setenv("SUPABASE_ANON_KEY", "anon-key")
    clean_env.setenv("CACHE_TTL_HOURS", "2.5")
    clean_env.setenv("CACHE_COALESCE_REQUESTS", "true")
    clean_env.setenv("GEOCODING_TIMEOUT", "4")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.gemini.api_key == "gem-key"
    assert settings.supabase.configured
    assert settings.supabase.key == "anon-key"
    assert settings.cache.ttl_hours == 2.5
    assert settings.cache.coalesce_requests is True
    assert settings.geocoding.request_timeout == 4.0
    assert settings.logging.level == LogLevel.DEBUG


def test_blank_credentials_are_missing(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "")
    clean_env.setenv("TWITTER_BEARER_TOKEN", "   ")

    settings = Settings(_env_file=None)

    assert settings.gemini.api_key is None
    assert settings.social.bearer_token is None


def test_explicit_sections_win_over_environment(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "from-env")

    settings = Settings(_env_file=None, gemini={"api_key": "explicit"})

    assert settings.gemini.api_key == "explicit"


def test_invalid_values_are_rejected(clean_env):
    clean_env.setenv("SOCIAL_MAX_RESULTS", "5")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)

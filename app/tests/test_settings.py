from __future__ import annotations

import pytest

from app.config import settings as settings_module
from app.config.settings import Settings, parse_bool, parse_choice, parse_float, parse_int

ENV_KEYS = (
    "REDIS_URL",
    "REDIS_TLS_VERIFY",
    "CACHE_BACKEND",
    "PRICE_API_URL",
    "PRICE_API_KEY",
    "UPSTREAM_TIMEOUT_S",
    "PRICE_CACHE_TTL_S",
    "HISTORY_CACHE_TTL_S",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.REDIS_URL == "redis://localhost:6379/0"
    assert s.REDIS_TLS_VERIFY is True
    assert s.CACHE_BACKEND == "redis"
    assert s.PRICE_API_URL == "https://api.coingecko.com/api/v3"
    assert s.PRICE_API_KEY is None
    assert s.UPSTREAM_TIMEOUT_S == 10.0
    assert s.PRICE_CACHE_TTL_S == 60
    assert s.HISTORY_CACHE_TTL_S == 300
    assert s.LOG_LEVEL == "INFO"


def test_overrides(clean_env):
    clean_env.setenv("CACHE_BACKEND", "Memory")
    clean_env.setenv("REDIS_TLS_VERIFY", "false")
    clean_env.setenv("PRICE_API_URL", "https://pro-api.coingecko.com/api/v3/")
    clean_env.setenv("PRICE_API_KEY", "k")
    clean_env.setenv("PRICE_CACHE_TTL_S", "15")
    clean_env.setenv("HISTORY_CACHE_TTL_S", "900")
    clean_env.setenv("UPSTREAM_TIMEOUT_S", "2.5")
    clean_env.setenv("LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.CACHE_BACKEND == "memory"
    assert s.REDIS_TLS_VERIFY is False
    assert s.PRICE_API_URL == "https://pro-api.coingecko.com/api/v3"
    assert s.PRICE_API_KEY == "k"
    assert s.PRICE_CACHE_TTL_S == 15
    assert s.HISTORY_CACHE_TTL_S == 900
    assert s.UPSTREAM_TIMEOUT_S == 2.5
    assert s.LOG_LEVEL == "DEBUG"


def test_invalid_values_fail_fast(clean_env):
    clean_env.setenv("CACHE_BACKEND", "memcached")
    with pytest.raises(ValueError):
        Settings.from_env()

    clean_env.setenv("CACHE_BACKEND", "redis")
    clean_env.setenv("PRICE_CACHE_TTL_S", "soon")
    with pytest.raises(ValueError):
        Settings.from_env()


def test_get_settings_is_cached(clean_env):
    clean_env.setattr(settings_module, "_settings", None)
    first = settings_module.get_settings()
    assert settings_module.get_settings() is first


def test_parsers():
    assert parse_bool(None, True) is True
    assert parse_bool("on", False) is True
    assert parse_bool("0", True) is False
    assert parse_int(" ", 3) == 3
    assert parse_float(None, 1.5) == 1.5
    assert parse_choice(None, ("a", "b"), "a") == "a"

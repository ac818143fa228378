# app/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


CACHE_BACKENDS = ("redis", "memory")


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def parse_choice(value: str | None, choices: tuple[str, ...], default: str) -> str:
    if value is None or value.strip() == "":
        return default
    v = value.strip().lower()
    if v not in choices:
        raise ValueError(f"Unsupported value '{value}', expected one of {', '.join(choices)}")
    return v


@dataclass(frozen=True)
class Settings:
    REDIS_URL: str
    REDIS_TLS_VERIFY: bool
    CACHE_BACKEND: str
    PRICE_API_URL: str
    PRICE_API_KEY: Optional[str]
    UPSTREAM_TIMEOUT_S: float
    PRICE_CACHE_TTL_S: int
    HISTORY_CACHE_TTL_S: int
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            REDIS_URL=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            REDIS_TLS_VERIFY=parse_bool(os.getenv("REDIS_TLS_VERIFY"), True),
            CACHE_BACKEND=parse_choice(os.getenv("CACHE_BACKEND"), CACHE_BACKENDS, "redis"),
            PRICE_API_URL=os.getenv("PRICE_API_URL", "https://api.coingecko.com/api/v3").rstrip("/"),
            PRICE_API_KEY=os.getenv("PRICE_API_KEY") or None,
            UPSTREAM_TIMEOUT_S=parse_float(os.getenv("UPSTREAM_TIMEOUT_S"), 10.0),
            PRICE_CACHE_TTL_S=parse_int(os.getenv("PRICE_CACHE_TTL_S"), 60),
            HISTORY_CACHE_TTL_S=parse_int(os.getenv("HISTORY_CACHE_TTL_S"), 300),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings

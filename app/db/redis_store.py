"""Redis-backed key-value store and store lifecycle helpers."""

from __future__ import annotations

import logging
from typing import Any, Optional

import redis.asyncio as aioredis

from app.config.settings import Settings
from app.utils.cache import KeyValueStore, MemoryStore

logger = logging.getLogger("crypto_cache.store")


class RedisStore:
    """Thin adapter exposing the store capability on top of `redis.asyncio`."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, tls_verify: bool = True) -> "RedisStore":
        kwargs: dict[str, Any] = {
            "encoding": "utf-8",
            "decode_responses": True,
            "health_check_interval": 15,
        }
        if url.startswith("rediss://") and not tls_verify:
            kwargs["ssl_cert_reqs"] = "none"
        return cls(aioredis.from_url(url, **kwargs))

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


def open_store(settings: Settings) -> KeyValueStore:
    """Build the process-wide store selected by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == "memory":
        logger.info("cache backend: in-process memory store")
        return MemoryStore()

    logger.info("cache backend: redis")
    return RedisStore.from_url(settings.REDIS_URL, tls_verify=settings.REDIS_TLS_VERIFY)


async def close_store(store: Any) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        await close()

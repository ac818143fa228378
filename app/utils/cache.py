"""
Cache gateway over a key-value store.

`lookup` reports hit / miss / failure as an explicit result so callers can
tell "nothing cached, go fetch" apart from a broken cache without catching
exceptions. `get_cached_or_raise` is the raising form of the same thing.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple, Type, Union, runtime_checkable

from pydantic import BaseModel

from app.utils.errors import AppError, CacheMissError, InternalError, describe


PRICE_KEY_PREFIX = "crypto:price"
HISTORY_KEY_PREFIX = "crypto:history"


def price_cache_key(symbol: str) -> str:
    return f"{PRICE_KEY_PREFIX}:{symbol.lower()}"


def history_cache_key(symbol: str, days: int) -> str:
    return f"{HISTORY_KEY_PREFIX}:{symbol.lower()}:{days}"


@runtime_checkable
class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None: ...


class MemoryStore:
    """
    In-process store with per-entry expiry.

    Expired entries are dropped lazily when read. Suitable for local runs
    and tests; each worker process holds its own copy.
    """

    def __init__(self) -> None:
        # key -> (expires_at, value)
        self._data: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[str]:
        if key not in self._data:
            return None

        expires_at, value = self._data[key]

        # Check if entry has expired
        if time.time() >= expires_at:
            del self._data[key]
            return None

        return value

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self._data[key] = (time.time() + ttl_seconds, value)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._data.clear()


# ----------------------------
# Lookup results
# ----------------------------
@dataclass(frozen=True)
class CacheHit:
    value: Any


@dataclass(frozen=True)
class CacheMiss:
    key: str

    def to_error(self) -> CacheMissError:
        return CacheMissError(self.key)


@dataclass(frozen=True)
class CacheFailure:
    error: AppError


CacheResult = Union[CacheHit, CacheMiss, CacheFailure]


def _decode(raw: str, model: Optional[Type[BaseModel]]) -> Any:
    if model is not None:
        return model.model_validate_json(raw)
    return json.loads(raw)


async def lookup(
    store: KeyValueStore,
    key: str,
    model: Optional[Type[BaseModel]] = None,
) -> CacheResult:
    """
    Read `key` from the store.

    With `model`, the payload must validate into that model; otherwise it is
    returned exactly as JSON-decoded. Undecodable payloads and store errors
    are failures, never misses.
    """
    try:
        raw = await store.get(key)
    except Exception as exc:
        return CacheFailure(InternalError({"cacheKey": key, "originalError": describe(exc)}))

    if not raw:
        return CacheMiss(key)

    try:
        return CacheHit(_decode(raw, model))
    except AppError as exc:
        return CacheFailure(exc)
    except Exception as exc:
        return CacheFailure(InternalError({"cacheKey": key, "originalError": describe(exc)}))


async def get_cached_or_raise(
    store: KeyValueStore,
    key: str,
    model: Optional[Type[BaseModel]] = None,
) -> Any:
    result = await lookup(store, key, model)
    if isinstance(result, CacheHit):
        return result.value
    if isinstance(result, CacheMiss):
        raise result.to_error()
    raise result.error


def _encode(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value)


async def set_with_expiry(
    store: KeyValueStore,
    key: str,
    ttl_seconds: int,
    value: Any,
) -> None:
    """Serialize `value` and store it under `key` for `ttl_seconds`."""
    try:
        await store.set_with_expiry(key, ttl_seconds, _encode(value))
    except AppError:
        raise
    except Exception as exc:
        raise InternalError({"cacheKey": key, "originalError": describe(exc)}) from exc

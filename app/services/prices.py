"""
Read-through price pipeline.

Both entities follow the same shape: cache lookup, upstream fetch on a
miss, typed parse of the upstream body, cache write with the entity's TTL.
A cache miss only ever means "go fetch"; a not-found from the upstream
data is terminal.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote

from pydantic import ValidationError as PayloadError

from app.schemas.crypto import HistoryChart, MarketChartPayload, Price, quote_for
from app.services.coingecko import MARKET_CHART_PATH, SIMPLE_PRICE_PATH, ApiResult
from app.utils.cache import (
    CacheFailure,
    CacheHit,
    KeyValueStore,
    history_cache_key,
    lookup,
    price_cache_key,
    set_with_expiry,
)
from app.utils.errors import (
    MSG_CRYPTO_NOT_FOUND,
    MSG_HISTORY_NOT_FOUND,
    AppError,
    InternalError,
    NotFoundError,
    describe,
)

logger = logging.getLogger("crypto_cache.prices")

VS_CURRENCY = "usd"


class UpstreamClient(Protocol):
    async def fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResult: ...


def _raise_for_result(result: ApiResult) -> None:
    if result.success:
        return
    error = result.error
    if error is None:
        raise InternalError({"apiError": None})
    raise AppError(error.message, error.status_code, {"apiError": error.details}, code=error.code)


class PriceService:
    def __init__(
        self,
        store: KeyValueStore,
        client: UpstreamClient,
        *,
        price_ttl_s: int,
        history_ttl_s: int,
    ) -> None:
        self._store = store
        self._client = client
        self._price_ttl_s = price_ttl_s
        self._history_ttl_s = history_ttl_s

    async def _cached(self, key: str, model: type) -> Any:
        """Return the cached model, None on a miss; re-raise cache failures."""
        result = await lookup(self._store, key, model)
        if isinstance(result, CacheHit):
            logger.debug("cache hit | %s", key)
            return result.value
        if isinstance(result, CacheFailure):
            logger.warning("cache read failed | %s | %s", key, result.error.details)
            raise result.error
        logger.debug("cache miss | %s", key)
        return None

    async def get_crypto_price(self, symbol: str) -> Price:
        sym = symbol.strip().lower()
        cache_key = price_cache_key(sym)

        cached = await self._cached(cache_key, Price)
        if cached is not None:
            return cached

        try:
            result = await self._client.fetch(
                SIMPLE_PRICE_PATH,
                {"ids": sym, "vs_currencies": VS_CURRENCY},
            )
            _raise_for_result(result)

            try:
                coin = quote_for(result.data, sym)
            except (TypeError, PayloadError) as exc:
                raise InternalError({"symbol": symbol, "originalError": describe(exc)}) from exc

            if coin is None or coin.usd is None:
                raise NotFoundError(MSG_CRYPTO_NOT_FOUND, {"symbol": symbol})

            price = Price(symbol=sym, price=coin.usd)
            await set_with_expiry(self._store, cache_key, self._price_ttl_s, price)
            logger.info("price cached | %s | ttl=%ss", cache_key, self._price_ttl_s)
            return price
        except AppError:
            raise
        except Exception as exc:
            logger.exception("unexpected error fetching price | %s", sym)
            raise InternalError({"originalError": describe(exc)}) from exc

    async def get_crypto_market_chart(self, symbol: str, days: int) -> HistoryChart:
        sym = symbol.strip().lower()
        cache_key = history_cache_key(sym, days)

        cached = await self._cached(cache_key, HistoryChart)
        if cached is not None:
            return cached

        try:
            result = await self._client.fetch(
                MARKET_CHART_PATH.format(symbol=quote(sym, safe="")),
                {"vs_currency": VS_CURRENCY, "days": days},
            )
            _raise_for_result(result)

            try:
                payload = MarketChartPayload.model_validate(result.data or {})
            except PayloadError as exc:
                raise InternalError(
                    {"symbol": symbol, "days": days, "originalError": describe(exc)}
                ) from exc

            # absent and empty series are the same not-found
            if not payload.prices:
                raise NotFoundError(MSG_HISTORY_NOT_FOUND, {"symbol": symbol, "days": days})

            chart = payload.to_chart()
            await set_with_expiry(self._store, cache_key, self._history_ttl_s, chart)
            logger.info(
                "history cached | %s | points=%d | ttl=%ss",
                cache_key,
                len(chart.data),
                self._history_ttl_s,
            )
            return chart
        except AppError:
            raise
        except Exception as exc:
            logger.exception("unexpected error fetching history | %s | days=%s", sym, days)
            raise InternalError({"originalError": describe(exc)}) from exc

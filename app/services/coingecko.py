"""Client for the CoinGecko-compatible price API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.utils.errors import (
    BAD_REQUEST,
    FORBIDDEN,
    INTERNAL_SERVER_ERROR,
    MSG_API_BAD_REQUEST,
    MSG_API_NETWORK_ERROR,
    MSG_API_NOT_FOUND,
    MSG_API_RATE_LIMITED,
    MSG_API_SERVER_ERROR,
    NOT_FOUND,
    SERVICE_UNAVAILABLE,
    TOO_MANY_REQUESTS,
)

logger = logging.getLogger("crypto_cache.upstream")

SIMPLE_PRICE_PATH = "/simple/price"
MARKET_CHART_PATH = "/coins/{symbol}/market_chart"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "crypto-price-cache/1.0",
}

# upstream status -> (code, message, status we report)
_STATUS_MAP: Dict[int, tuple[str, str, int]] = {
    400: ("BAD_REQUEST", MSG_API_BAD_REQUEST, BAD_REQUEST),
    403: ("RATE_LIMITED", MSG_API_RATE_LIMITED, FORBIDDEN),
    404: ("NOT_FOUND", MSG_API_NOT_FOUND, NOT_FOUND),
    429: ("RATE_LIMITED", MSG_API_RATE_LIMITED, TOO_MANY_REQUESTS),
}


@dataclass(frozen=True)
class UpstreamError:
    code: str
    message: str
    status_code: int
    details: Any = None


@dataclass(frozen=True)
class ApiResult:
    success: bool
    data: Any = None
    error: Optional[UpstreamError] = None

    @classmethod
    def ok(cls, data: Any) -> "ApiResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: UpstreamError) -> "ApiResult":
        return cls(success=False, error=error)


def classify_status(status_code: int) -> UpstreamError:
    """Map a non-2xx upstream status onto the error taxonomy."""
    code, message, reported = _STATUS_MAP.get(
        status_code,
        ("SERVER_ERROR", MSG_API_SERVER_ERROR, INTERNAL_SERVER_ERROR),
    )
    return UpstreamError(code, message, reported, {"status": status_code})


class PriceApiClient:
    """
    One-shot GET requests against the price API.

    `fetch` never raises for transport or HTTP failures; it returns an
    `ApiResult` whose error is already classified. There is no retry.
    """

    def __init__(
        self,
        base_url: str,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
        api_key: str | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout_s)
        self._headers = dict(DEFAULT_HEADERS)
        if api_key:
            self._headers["x-cg-pro-api-key"] = api_key

    async def fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResult:
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(url, params=params, headers=self._headers)
        except httpx.RequestError as exc:
            logger.warning("price api unreachable | %s | %s", url, type(exc).__name__)
            return ApiResult.fail(
                UpstreamError(
                    "NETWORK_ERROR",
                    MSG_API_NETWORK_ERROR,
                    SERVICE_UNAVAILABLE,
                    {"reason": type(exc).__name__},
                )
            )

        if not response.is_success:
            logger.warning("price api error | %s | status=%s", url, response.status_code)
            return ApiResult.fail(classify_status(response.status_code))

        try:
            return ApiResult.ok(response.json())
        except ValueError:
            return ApiResult.fail(
                UpstreamError(
                    "SERVER_ERROR",
                    MSG_API_SERVER_ERROR,
                    INTERNAL_SERVER_ERROR,
                    {"status": response.status_code, "reason": "invalid json"},
                )
            )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

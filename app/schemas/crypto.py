"""Pydantic models for price responses and upstream price API payloads."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Price(BaseModel):
    """Current USD price of one asset."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Lowercase asset id, e.g. bitcoin")
    price: float


class HistoryPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: int = Field(..., description="Epoch milliseconds")
    price: float


class HistoryChart(BaseModel):
    """Price history in upstream chronological order."""

    model_config = ConfigDict(frozen=True)

    data: List[HistoryPoint]


# ---------- Upstream payloads ----------


class CoinQuote(BaseModel):
    """One entry of the /simple/price mapping. Only USD is requested."""

    model_config = ConfigDict(extra="ignore")

    usd: Optional[float] = None


class MarketChartPayload(BaseModel):
    """Body of /coins/{id}/market_chart; only the price series is used."""

    model_config = ConfigDict(extra="ignore")

    prices: Optional[List[Tuple[int, float]]] = None

    def to_chart(self) -> HistoryChart:
        return HistoryChart(
            data=[HistoryPoint(time=ts, price=price) for ts, price in self.prices or []]
        )


def quote_for(payload: Any, symbol: str) -> CoinQuote | None:
    """
    Return the quote entry for `symbol` from a /simple/price body.

    Raises TypeError when the body is not a mapping and pydantic's
    ValidationError when the entry is malformed.
    """
    if not isinstance(payload, dict):
        raise TypeError(f"expected an object, got {type(payload).__name__}")
    entry = payload.get(symbol)
    if entry is None:
        return None
    return CoinQuote.model_validate(entry)

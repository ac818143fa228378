from fastapi import APIRouter, Depends, Request

from app.schemas.crypto import HistoryChart, Price
from app.services.prices import PriceService
from app.utils.validation import require_symbol, validate_and_parse_days


router = APIRouter(tags=["crypto"])


def get_price_service(request: Request) -> PriceService:
    return request.app.state.price_service


@router.get("/price/{symbol}", response_model=Price)
async def get_price(symbol: str, service: PriceService = Depends(get_price_service)):
    """
    Current USD price, served from cache when fresh.
    Example: /price/bitcoin
    """
    return await service.get_crypto_price(require_symbol(symbol))


@router.get("/history/{symbol}/{days}", response_model=HistoryChart)
async def get_history(
    symbol: str,
    days: str,
    service: PriceService = Depends(get_price_service),
):
    """
    USD price history over the last `days` days (1-365).
    Example: /history/bitcoin/30
    """
    parsed_days = validate_and_parse_days(days, "days")
    return await service.get_crypto_market_chart(require_symbol(symbol), parsed_days)

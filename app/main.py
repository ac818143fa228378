# app/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.crypto import router as crypto_router
from app.api.errors import register_error_handlers
from app.api.health import router as health_router

from app.config.settings import Settings, get_settings
from app.db.redis_store import close_store, open_store
from app.services.coingecko import PriceApiClient
from app.services.prices import PriceService


app = FastAPI(title="Crypto Price Cache")

# Routers
app.include_router(health_router)
app.include_router(crypto_router)

register_error_handlers(app)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Crypto price cache"}


@app.on_event("startup")
async def on_startup() -> None:
    settings = get_settings()
    _configure_logging(settings)

    # Shared for the process lifetime; closed on shutdown
    app.state.store = open_store(settings)
    app.state.api_client = PriceApiClient(
        settings.PRICE_API_URL,
        timeout_s=settings.UPSTREAM_TIMEOUT_S,
        api_key=settings.PRICE_API_KEY,
    )
    app.state.price_service = PriceService(
        app.state.store,
        app.state.api_client,
        price_ttl_s=settings.PRICE_CACHE_TTL_S,
        history_ttl_s=settings.HISTORY_CACHE_TTL_S,
    )
    logging.getLogger("crypto_cache").info(
        "started | upstream=%s | backend=%s", settings.PRICE_API_URL, settings.CACHE_BACKEND
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    client = getattr(app.state, "api_client", None)
    if client is not None:
        await client.aclose()
    store = getattr(app.state, "store", None)
    if store is not None:
        await close_store(store)
    app.state.price_service = None

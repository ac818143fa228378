from __future__ import annotations

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from app import main as main_module
from app.config import settings as settings_module
from app.config.settings import Settings
from app.utils.cache import MemoryStore

UPSTREAM = "https://api.test/api/v3"


@pytest.fixture()
def memory_settings(monkeypatch):
    settings = Settings(
        REDIS_URL="redis://localhost:6379/0",
        REDIS_TLS_VERIFY=True,
        CACHE_BACKEND="memory",
        PRICE_API_URL=UPSTREAM,
        PRICE_API_KEY=None,
        UPSTREAM_TIMEOUT_S=2.0,
        PRICE_CACHE_TTL_S=60,
        HISTORY_CACHE_TTL_S=300,
        LOG_LEVEL="WARNING",
    )
    monkeypatch.setattr(settings_module, "_settings", settings)
    return settings


def test_startup_wires_service_and_serves_from_cache(memory_settings):
    with respx.mock(assert_all_called=True) as upstream:
        route = upstream.get(f"{UPSTREAM}/simple/price").mock(
            return_value=httpx.Response(200, json={"bitcoin": {"usd": 64000.5}})
        )

        with TestClient(main_module.app) as client:
            assert isinstance(main_module.app.state.store, MemoryStore)

            first = client.get("/price/Bitcoin")
            second = client.get("/price/bitcoin")

            assert client.get("/ready").status_code == 200
            assert client.get("/").json() == {"message": "Crypto price cache"}

    assert first.status_code == 200
    assert first.json() == {"symbol": "bitcoin", "price": 64000.5}
    assert second.json() == first.json()
    assert route.call_count == 1
    assert main_module.app.state.price_service is None


def test_upstream_outage_is_503(memory_settings):
    with respx.mock as upstream:
        upstream.get(f"{UPSTREAM}/coins/bitcoin/market_chart").mock(
            side_effect=httpx.ConnectError("no route to host")
        )

        with TestClient(main_module.app) as client:
            resp = client.get("/history/bitcoin/30")

    assert resp.status_code == 503
    assert resp.json() == {
        "message": "Unable to reach price API",
        "details": {"apiError": {"reason": "ConnectError"}},
    }

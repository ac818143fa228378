# app/api/health.py
from __future__ import annotations

import time
from typing import Any, Dict, List

from fastapi import APIRouter, Request, Response

router = APIRouter(tags=["health"])

_STARTED = time.monotonic()


def _elapsed_ms(since: float) -> int:
    return int((time.monotonic() - since) * 1000)


async def cache_check(store: Any) -> Dict[str, Any]:
    """Ping the cache store; the result is never raised, only reported."""
    if store is None:
        return {"ok": False, "backend": None, "latency_ms": 0, "error": "store not initialized"}

    backend = type(store).__name__
    started = time.monotonic()
    try:
        ok = bool(await store.ping())
    except Exception as e:
        return {
            "ok": False,
            "backend": backend,
            "latency_ms": _elapsed_ms(started),
            "error": type(e).__name__,
        }
    return {"ok": ok, "backend": backend, "latency_ms": _elapsed_ms(started)}


async def build_ready_payload(request: Request) -> Dict[str, Any]:
    cache = await cache_check(getattr(request.app.state, "store", None))
    reasons: List[str] = [] if cache["ok"] else ["cache_unhealthy"]

    return {
        "status": "degraded" if reasons else "ok",
        "uptime_s": int(time.monotonic() - _STARTED),
        "degraded": bool(reasons),
        "degraded_reasons": reasons,
        "checks": {"cache": cache},
    }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request, response: Response):
    payload = await build_ready_payload(request)
    if payload["degraded"]:
        response.status_code = 503
    return payload


@router.get("/health")
async def health(request: Request, response: Response):
    return await ready(request, response)

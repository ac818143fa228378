# app/api/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.utils.errors import INTERNAL_SERVER_ERROR, MSG_INTERNAL, AppError

logger = logging.getLogger("crypto_cache.api")


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= INTERNAL_SERVER_ERROR:
        logger.error("%s %s -> %s | %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    # never leak internal text to the caller
    logger.exception("unhandled error | %s %s", request.method, request.url.path)
    return JSONResponse(status_code=INTERNAL_SERVER_ERROR, content={"message": MSG_INTERNAL})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(Exception, handle_unhandled_exception)

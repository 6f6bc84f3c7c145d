"""Render every failure as a JSON ``{"error": ...}`` body."""
import logging

import aiosqlite
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
    )


async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected body on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


async def store_error(request: Request, exc: aiosqlite.Error) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Database error"}, status_code=500)


def install_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(StarletteHTTPException, http_error)
    application.add_exception_handler(RequestValidationError, validation_error)
    application.add_exception_handler(aiosqlite.Error, store_error)

"""Exception handlers turning bridge errors into JSON error bodies."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AuthenticationError,
    InvalidRequestError,
    ProxyError,
    UpstreamError,
)

logger = logging.getLogger("chatbridge")


def error_body(message: str, error_type: str, code: str) -> dict:
    return {"error": {"message": message, "type": error_type, "code": code}}


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    logger.warning("Rejected request to %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=400,
        content=error_body(exc.message, "invalid_request_error", exc.code),
    )


async def authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=error_body(exc.message, "authentication_error", exc.code),
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Upstream error for %s: %s", request.url.path, exc.message)
    code = f"upstream_{exc.status_code}" if exc.status_code else "upstream_unavailable"
    return JSONResponse(
        status_code=500,
        content=error_body(exc.message, "upstream_error", code),
    )


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    logger.error("Request error for %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=500,
        content=error_body(exc.message, "server_error", "internal_error"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Request error for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=error_body(str(exc) or "Unknown error", "server_error", "internal_error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``; the most specific class wins."""
    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(AuthenticationError, authentication_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

"""Request/response debug logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Mapping

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("chatbridge")

MASKED_HEADER_PREFIX = 10


def mask_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers, keeping only the start of authorization values."""
    masked: dict[str, str] = {}
    for key, value in headers.items():
        if "authorization" in key.lower():
            masked[key] = f"{value[:MASKED_HEADER_PREFIX]}..."
        else:
            masked[key] = value
    return masked


def truncate_body(body: bytes, max_length: int) -> str:
    text = body.decode("utf-8", errors="replace")
    if not text:
        return "[EMPTY BODY]"
    if len(text) > max_length:
        return f"{text[:max_length]}...\n[TRUNCATED - Body length: {len(text)} chars]"
    return text


class RequestDebugMiddleware(BaseHTTPMiddleware):
    """Logs every request with its status and duration.

    With ``verbose`` enabled, request headers and bodies are logged as well.
    Response bodies are never read here so streaming responses stay intact.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        verbose: bool = False,
        include_headers: bool = True,
        include_body: bool = True,
        max_body_length: int = 10000,
    ) -> None:
        super().__init__(app)
        self.verbose = verbose
        self.include_headers = include_headers
        self.include_body = include_body
        self.max_body_length = max_body_length

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        if self.verbose:
            logger.info("Incoming request: %s %s", request.method, request.url.path)
            if self.include_headers:
                logger.info("Request headers: %s", mask_headers(request.headers))
            if self.include_body and request.method != "GET":
                body = await request.body()
                logger.info("Request body: %s", truncate_body(body, self.max_body_length))

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %s (%.0fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        if self.verbose and self.include_headers:
            logger.info("Response headers: %s", dict(response.headers))
        return response

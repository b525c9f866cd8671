"""Registry for per-host HTTPX transports (tests and in-process backends)."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("chatbridge")

_TRANSPORTS: dict[str, httpx.AsyncBaseTransport] = {}


def _host_key(url: str) -> str:
    return urlparse(url).netloc.strip().lower()


def register_upstream_transport(url: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route every request to the URL's host through ``transport``."""
    host = _host_key(url)
    if not host:
        raise ValueError(f"cannot register a transport for URL without host: {url!r}")
    _TRANSPORTS[host] = transport
    logger.debug("Registered upstream transport for host '%s'", host)


def clear_upstream_transports() -> None:
    """Clear all registered transports (useful for tests)."""
    _TRANSPORTS.clear()


def get_upstream_transport(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Return a registered transport for the URL's host (if any)."""
    if not url:
        return None
    host = _host_key(url)
    if not host:
        return None
    return _TRANSPORTS.get(host)

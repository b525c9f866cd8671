"""Logging module for the bridge."""

from .middleware import RequestDebugMiddleware, mask_headers
from .setup import LOG_DATE_FORMAT, LOG_FORMAT, LOGGER_NAME, setup_logging

__all__ = [
    "LOG_DATE_FORMAT",
    "LOG_FORMAT",
    "LOGGER_NAME",
    "RequestDebugMiddleware",
    "mask_headers",
    "setup_logging",
]

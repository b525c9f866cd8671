"""Core module initialization."""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidRequestError,
    ProxyError,
    UpstreamError,
)
from .sse import DONE_FRAME, SSEFrame, format_sse_data, parse_frame, split_frames
from .upstream import ResponsesBackend, UpstreamStream, build_backend

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DONE_FRAME",
    "InvalidRequestError",
    "ProxyError",
    "ResponsesBackend",
    "SSEFrame",
    "UpstreamError",
    "UpstreamStream",
    "build_backend",
    "format_sse_data",
    "parse_frame",
    "split_frames",
]

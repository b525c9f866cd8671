"""Responses backend support for the chat bridge.

Key components:
- translator: Chat request -> responses payload (content normalization)
- tools: Tool name -> tool descriptor mapping
- stream_adapter: Convert responses SSE events to chat completion chunks
"""

from .stream_adapter import ResponsesToChatStreamAdapter, adapt_responses_stream
from .tools import TOOL_DESCRIPTORS, map_tools
from .translator import (
    DEFAULT_MODEL,
    build_backend_payload,
    normalize_content,
    normalize_message,
)

__all__ = [
    "DEFAULT_MODEL",
    "TOOL_DESCRIPTORS",
    "ResponsesToChatStreamAdapter",
    "adapt_responses_stream",
    "build_backend_payload",
    "map_tools",
    "normalize_content",
    "normalize_message",
]

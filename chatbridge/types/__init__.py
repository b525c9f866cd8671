"""Type definitions for the bridge."""

from .chat import (
    ChatMessage,
    ChatRequest,
    ClientDeltaEvent,
    ContentItem,
    Delta,
    NormalizedContentItem,
)
from .responses import BackendPayload, NormalizedMessage, ToolDescriptor

__all__ = [
    "BackendPayload",
    "ChatMessage",
    "ChatRequest",
    "ClientDeltaEvent",
    "ContentItem",
    "Delta",
    "NormalizedContentItem",
    "NormalizedMessage",
    "ToolDescriptor",
]

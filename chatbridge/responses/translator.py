"""Translation of chat requests into responses backend payloads.

This module handles:
1. Normalizing message content into the item shapes the backend accepts
2. Enforcing which content types each role may carry
3. Assembling the outbound request body from a validated chat request
"""

import logging
from typing import Any, Optional

from ..types.chat import (
    CONTENT_IMAGE_URL,
    CONTENT_INPUT_IMAGE,
    CONTENT_INPUT_TEXT,
    CONTENT_OUTPUT_TEXT,
    CONTENT_REFUSAL,
    CONTENT_TEXT,
    ROLE_ASSISTANT,
    ChatMessage,
    ChatRequest,
    NormalizedContentItem,
)
from ..types.responses import BackendPayload, NormalizedMessage
from .tools import map_tools

logger = logging.getLogger("chatbridge")

DEFAULT_MODEL = "gpt-4o"

# Normalized tags each side of the conversation may carry unchanged
ASSISTANT_CONTENT_TYPES = frozenset({CONTENT_OUTPUT_TEXT, CONTENT_REFUSAL})
INPUT_CONTENT_TYPES = frozenset({CONTENT_INPUT_TEXT, CONTENT_INPUT_IMAGE})


def text_type_for_role(role: str) -> str:
    """Return the text tag the backend expects for a role."""
    return CONTENT_OUTPUT_TEXT if role == ROLE_ASSISTANT else CONTENT_INPUT_TEXT


def _image_url_value(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        url = value.get("url")
        if isinstance(url, str):
            return url
    return None


def _normalize_item(item: Any, role: str) -> Optional[NormalizedContentItem]:
    """Apply the per-item rules; None means the item is dropped."""
    if not isinstance(item, dict):
        logger.debug("Translator: dropping non-object content item for role %s", role)
        return None

    is_assistant = role == ROLE_ASSISTANT
    item_type = item.get("type")

    if item_type == CONTENT_TEXT:
        return {"type": text_type_for_role(role), "text": item.get("text", "")}

    if item_type == CONTENT_IMAGE_URL and not is_assistant:
        url = _image_url_value(item.get("image_url"))
        if url:
            return {"type": CONTENT_INPUT_IMAGE, "image_url": url}

    allowed = ASSISTANT_CONTENT_TYPES if is_assistant else INPUT_CONTENT_TYPES
    if item_type in allowed:
        return item

    if is_assistant and item_type == CONTENT_INPUT_TEXT:
        return {"type": CONTENT_OUTPUT_TEXT, "text": item.get("text", "")}

    logger.debug(
        "Translator: skipping incompatible content type %s for role %s", item_type, role
    )
    return None


def normalize_content(role: str, content: Any) -> Optional[list[NormalizedContentItem]]:
    """Convert one message's content into the backend's item list.

    Args:
        role: Role of the owning message.
        content: A plain string or a list of content items.

    Returns:
        The normalized items in input order, or None when the content is
        neither a string nor a list.
    """
    if isinstance(content, str):
        return [{"type": text_type_for_role(role), "text": content}]
    if isinstance(content, list):
        normalized: list[NormalizedContentItem] = []
        for item in content:
            converted = _normalize_item(item, role)
            if converted is not None:
                normalized.append(converted)
        return normalized
    return None


def normalize_message(message: ChatMessage) -> NormalizedMessage:
    """Keep only ``role`` and the normalized ``content`` of a message."""
    role = message["role"]
    normalized: NormalizedMessage = {"role": role}
    content = normalize_content(role, message.get("content"))
    if content is not None:
        normalized["content"] = content
    return normalized


def build_backend_payload(
    request: ChatRequest,
    *,
    default_model: str = DEFAULT_MODEL,
    stream: Optional[bool] = None,
) -> BackendPayload:
    """Assemble the responses request body for a validated chat request.

    Args:
        request: The validated inbound request.
        default_model: Model used when the request names none.
        stream: Overrides the request's own ``stream`` flag when given.

    Returns:
        The backend payload. Optional keys appear only when the caller
        supplied a usable value.
    """
    payload: BackendPayload = {
        "model": request.get("model") or default_model,
        "input": [normalize_message(message) for message in request["messages"]],
        "stream": bool(request.get("stream")) if stream is None else stream,
    }

    conversation_id = request.get("conversation_id")
    if conversation_id:
        payload["previous_response_id"] = conversation_id

    tools = request.get("tools")
    if tools:
        payload["tools"] = map_tools(tools)

    max_tokens = request.get("max_tokens")
    if max_tokens:
        payload["max_output_tokens"] = max_tokens

    return payload

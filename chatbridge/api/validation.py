"""Validation of inbound chat request bodies."""

import json
from typing import Any, Mapping

from ..core.exceptions import InvalidRequestError
from ..types.chat import ChatRequest


def _is_valid_message(message: Any) -> bool:
    if not isinstance(message, Mapping):
        return False
    if not message.get("role"):
        return False
    content = message.get("content")
    if isinstance(content, str):
        return True
    return isinstance(content, list) and len(content) > 0


def parse_chat_request(body: bytes) -> ChatRequest:
    """Decode and validate a ``POST /api/chat`` body.

    Only the structural requirements are checked here: a JSON object with a
    non-empty ``messages`` array whose entries each have a role and either
    string content or a non-empty content array. ``tools``, when given, must
    be an array and ``max_tokens`` an integer.

    Raises:
        InvalidRequestError: The body fails any of the checks.
    """
    try:
        payload = json.loads(body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError("Invalid JSON payload", code="invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidRequestError("Invalid JSON payload", code="invalid_json_shape")

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise InvalidRequestError(
            "Messages are required and must be an array", code="missing_parameter"
        )

    if not all(_is_valid_message(message) for message in messages):
        raise InvalidRequestError(
            "Each message must have a role and content (string or non-empty array)",
            code="invalid_message",
        )

    tools = payload.get("tools")
    if tools is not None and not isinstance(tools, list):
        raise InvalidRequestError("Tools must be an array", code="invalid_tools")

    max_tokens = payload.get("max_tokens")
    if max_tokens is not None and (isinstance(max_tokens, bool) or not isinstance(max_tokens, int)):
        raise InvalidRequestError("max_tokens must be an integer", code="invalid_max_tokens")

    return payload

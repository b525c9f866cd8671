"""Built-in message transforms.

Each factory returns a pure function taking the message list and returning a
new one; input lists and messages are never mutated.
"""

from typing import Callable

from ..types.chat import (
    CONTENT_INPUT_TEXT,
    CONTENT_TEXT,
    ROLE_SYSTEM,
    ROLE_USER,
    ChatMessage,
)

MessageTransform = Callable[[list[ChatMessage]], list[ChatMessage]]


def add_system_message(text: str) -> MessageTransform:
    """Prepend a system message unless the conversation already has one."""

    def transform(messages: list[ChatMessage]) -> list[ChatMessage]:
        if any(msg.get("role") == ROLE_SYSTEM for msg in messages):
            return messages
        return [{"role": ROLE_SYSTEM, "content": text}, *messages]

    return transform


def replace_system_messages(text: str) -> MessageTransform:
    """Drop every system message and prepend a single new one."""

    def transform(messages: list[ChatMessage]) -> list[ChatMessage]:
        others = [msg for msg in messages if msg.get("role") != ROLE_SYSTEM]
        return [{"role": ROLE_SYSTEM, "content": text}, *others]

    return transform


def prefix_user_messages(prefix: str) -> MessageTransform:
    """Prefix the text of every user message."""

    def _prefix_item(item):
        if isinstance(item, dict) and item.get("type") in (CONTENT_TEXT, CONTENT_INPUT_TEXT):
            return {**item, "text": f"{prefix} {item.get('text', '')}"}
        return item

    def transform(messages: list[ChatMessage]) -> list[ChatMessage]:
        result: list[ChatMessage] = []
        for msg in messages:
            content = msg.get("content")
            if msg.get("role") != ROLE_USER:
                result.append(msg)
            elif isinstance(content, str):
                result.append({**msg, "content": f"{prefix} {content}"})
            elif isinstance(content, list):
                result.append({**msg, "content": [_prefix_item(item) for item in content]})
            else:
                result.append(msg)
        return result

    return transform


def limit_message_history(max_messages: int) -> MessageTransform:
    """Keep system messages plus the most recent ``max_messages`` others."""

    def transform(messages: list[ChatMessage]) -> list[ChatMessage]:
        system = [msg for msg in messages if msg.get("role") == ROLE_SYSTEM]
        others = [msg for msg in messages if msg.get("role") != ROLE_SYSTEM]
        recent = others[-max_messages:] if max_messages > 0 else []
        return [*system, *recent]

    return transform

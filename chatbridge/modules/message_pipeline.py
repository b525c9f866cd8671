"""Message transform pipeline applied before request building."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from ..types.chat import ChatMessage
from .transforms import (
    MessageTransform,
    add_system_message,
    limit_message_history,
    prefix_user_messages,
    replace_system_messages,
)

logger = logging.getLogger("chatbridge")


def _require_str(options: Mapping[str, Any], key: str) -> str:
    value = options.get(key)
    if not isinstance(value, str):
        raise ValueError(f"option '{key}' must be a string")
    return value


def _require_int(options: Mapping[str, Any], key: str) -> int:
    value = options.get(key)
    if isinstance(value, bool):
        raise ValueError(f"option '{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"option '{key}' must be an integer") from exc


AVAILABLE_TRANSFORMS: dict[str, Callable[[Mapping[str, Any]], MessageTransform]] = {
    "add_system_message": lambda opts: add_system_message(_require_str(opts, "text")),
    "replace_system_messages": lambda opts: replace_system_messages(_require_str(opts, "text")),
    "prefix_user_messages": lambda opts: prefix_user_messages(_require_str(opts, "prefix")),
    "limit_message_history": lambda opts: limit_message_history(_require_int(opts, "max_messages")),
}

DEFAULT_TRANSFORMS_CONFIG: list[dict[str, Any]] = [
    {"name": "limit_message_history", "max_messages": 20},
]


@dataclass(frozen=True)
class MessageTransformPipeline:
    """An ordered, immutable sequence of message transforms."""

    transforms: tuple[MessageTransform, ...] = ()

    def apply(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        result = list(messages)
        for transform in self.transforms:
            result = transform(result)
        return result

    def __len__(self) -> int:
        return len(self.transforms)


def build_message_pipeline(entries: Iterable[Any] | None) -> MessageTransformPipeline:
    """Build the pipeline from ``message_transforms`` config entries.

    Each entry is a mapping with a ``name`` and the transform's options, or a
    bare name for transforms without options. Unknown names and entries with
    bad options are skipped with a warning.
    """
    if entries is None:
        entries = DEFAULT_TRANSFORMS_CONFIG

    transforms: list[MessageTransform] = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, Mapping):
            logger.warning("Ignoring message transform entry %r; expected a mapping", entry)
            continue
        name = entry.get("name")
        factory = AVAILABLE_TRANSFORMS.get(name) if isinstance(name, str) else None
        if factory is None:
            logger.warning("Unknown message transform '%s' configured; skipping", name)
            continue
        try:
            transforms.append(factory(entry))
        except ValueError as exc:
            logger.warning("Invalid options for message transform '%s': %s; skipping", name, exc)
            continue
        logger.debug("Registered message transform '%s'", name)
    return MessageTransformPipeline(tuple(transforms))

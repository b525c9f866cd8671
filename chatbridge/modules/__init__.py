"""Message transform pipeline and built-in transforms."""

from .message_pipeline import (
    AVAILABLE_TRANSFORMS,
    MessageTransformPipeline,
    build_message_pipeline,
)
from .transforms import (
    MessageTransform,
    add_system_message,
    limit_message_history,
    prefix_user_messages,
    replace_system_messages,
)

__all__ = [
    "AVAILABLE_TRANSFORMS",
    "MessageTransform",
    "MessageTransformPipeline",
    "add_system_message",
    "build_message_pipeline",
    "limit_message_history",
    "prefix_user_messages",
    "replace_system_messages",
]

"""Types for the chat completion side of the bridge.

This module defines the inbound request shape accepted from clients and the
incremental-delta chunks streamed back to them. Content items are tagged by
their ``type`` key; both the legacy chat completion tags (``text``,
``image_url``) and the already-normalized responses tags may appear in a
client message.
"""

from typing import Any, Literal, Union
from typing_extensions import NotRequired, TypedDict


# =============================================================================
# Roles and content tags
# =============================================================================

ChatRole = Literal["user", "assistant", "system"]

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"

# Legacy chat completion content tags
CONTENT_TEXT = "text"
CONTENT_IMAGE_URL = "image_url"

# Responses content tags
CONTENT_INPUT_TEXT = "input_text"
CONTENT_INPUT_IMAGE = "input_image"
CONTENT_OUTPUT_TEXT = "output_text"
CONTENT_REFUSAL = "refusal"


# =============================================================================
# Content items
# =============================================================================

class ImageUrlObject(TypedDict, total=False):
    """Wrapped image reference (``{"url": ...}``)."""
    url: str
    detail: str


class LegacyText(TypedDict):
    """Plain text item in the chat completion format."""
    type: Literal["text"]
    text: str


class LegacyImageRef(TypedDict):
    """Image item in the chat completion format.

    ``image_url`` is either the URL itself or an object wrapping it.
    """
    type: Literal["image_url"]
    image_url: Union[str, ImageUrlObject]


class InputText(TypedDict):
    """Text supplied by a user or system message."""
    type: Literal["input_text"]
    text: str


class InputImage(TypedDict):
    """Image supplied by a user or system message."""
    type: Literal["input_image"]
    image_url: str
    detail: NotRequired[str]


class OutputText(TypedDict):
    """Text previously produced by the assistant."""
    type: Literal["output_text"]
    text: str
    annotations: NotRequired[list[Any]]


class Refusal(TypedDict):
    """A refusal previously produced by the assistant."""
    type: Literal["refusal"]
    refusal: str


ContentItem = Union[LegacyText, LegacyImageRef, InputText, InputImage, OutputText, Refusal]
"""Any content item a client may send."""

NormalizedContentItem = Union[InputText, InputImage, OutputText, Refusal]
"""Content items accepted by the responses backend."""


# =============================================================================
# Messages and requests
# =============================================================================

class ChatMessage(TypedDict):
    """A single conversation turn.

    Attributes:
        role: Speaker of the message. Never changed by normalization.
        content: A plain string or an ordered list of content items.
    """
    role: ChatRole
    content: Union[str, list[ContentItem]]


class ChatRequest(TypedDict, total=False):
    """Validated inbound request body for ``POST /api/chat``.

    Attributes:
        messages: Non-empty, ordered conversation history.
        conversation_id: Opaque continuation token from a previous response.
        stream: Whether the client wants incremental deltas.
        model: Backend model id; a default is applied when missing.
        tools: Tool names (``"web_search"``) or pre-built tool descriptors.
        max_tokens: Upper bound on generated tokens.
    """
    messages: list[ChatMessage]
    conversation_id: str
    stream: bool
    model: str
    tools: list[Union[str, dict[str, Any]]]
    max_tokens: int


# =============================================================================
# Streaming output
# =============================================================================

CHUNK_OBJECT = "chat.completion.chunk"


class Delta(TypedDict, total=False):
    """Incremental update carried by a chunk.

    Attributes:
        role: Present only on the chunk announcing the assistant turn.
        content: Text fragment to append to the assistant message.
    """
    role: str
    content: str


class ChunkChoice(TypedDict):
    """A single choice inside a streamed chunk."""
    delta: Delta


class ClientDeltaEvent(TypedDict):
    """Chunk sent to clients as one ``data:`` frame."""
    id: str
    object: Literal["chat.completion.chunk"]
    choices: list[ChunkChoice]

"""Types for the responses backend.

These describe the outbound request body sent to ``POST /responses`` and the
streaming event vocabulary the backend emits. Only the fields the bridge reads
or writes are modelled here.
"""

from typing import Any, Literal, Union
from typing_extensions import NotRequired, TypedDict

from .chat import NormalizedContentItem


# =============================================================================
# Request Types
# =============================================================================

class NormalizedMessage(TypedDict):
    """A message in the backend ``input`` array."""
    role: str
    content: NotRequired[list[NormalizedContentItem]]


class WebSearchTool(TypedDict):
    """Built-in web search tool."""
    type: Literal["web_search_preview"]


ToolDescriptor = Union[WebSearchTool, dict[str, Any]]
"""A backend tool descriptor; callers may supply their own shapes."""


class BackendPayload(TypedDict):
    """Request body for the responses backend.

    Optional keys are only present when the caller supplied a usable value.
    """
    model: str
    input: list[NormalizedMessage]
    stream: bool
    previous_response_id: NotRequired[str]
    tools: NotRequired[list[ToolDescriptor]]
    max_output_tokens: NotRequired[int]


# =============================================================================
# Stream Event Types
# =============================================================================

class ResponseRef(TypedDict, total=False):
    """Subset of the response object nested in lifecycle events."""
    id: str
    status: str
    model: str


class ResponseCreatedEvent(TypedDict, total=False):
    """response.created - Response object created."""
    type: str
    response: ResponseRef


class OutputTextDeltaEvent(TypedDict, total=False):
    """response.output_text.delta - Text content streaming."""
    type: str
    item_id: str
    output_index: int
    content_index: int
    delta: str


# =============================================================================
# Event Type Constants
# =============================================================================

EVENT_RESPONSE_CREATED = "response.created"
EVENT_RESPONSE_COMPLETED = "response.completed"
EVENT_RESPONSE_FAILED = "response.failed"
EVENT_RESPONSE_INCOMPLETE = "response.incomplete"
EVENT_OUTPUT_TEXT_DELTA = "response.output_text.delta"
EVENT_ERROR = "error"

# SSE frames without an event line
EVENT_DEFAULT = "message"

"""Per-application collaborators used by the chat route."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..auth import BearerAuth
from ..core.upstream import ResponsesBackend
from ..modules import MessageTransformPipeline
from ..responses.stream_adapter import ResponsesToChatStreamAdapter
from ..responses.translator import DEFAULT_MODEL
from ..settings import StreamSettings


@dataclass(frozen=True)
class ChatService:
    """Immutable wiring built once in ``create_app`` and kept on ``app.state``."""

    backend: ResponsesBackend
    pipeline: MessageTransformPipeline = field(default_factory=MessageTransformPipeline)
    auth: BearerAuth = field(default_factory=BearerAuth)
    default_model: str = DEFAULT_MODEL
    stream: StreamSettings = field(default_factory=StreamSettings)

    def new_stream_adapter(self) -> ResponsesToChatStreamAdapter:
        return ResponsesToChatStreamAdapter(
            max_pending_chars=self.stream.max_pending_chars,
            max_pending_frames=self.stream.max_pending_frames,
        )

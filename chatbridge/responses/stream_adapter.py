"""Stream adapter for converting Responses API events to Chat Completions SSE.

Converts the responses streaming format into the chat completion chunk format
clients expect, reassembling JSON payloads that arrive split across reads.

Responses API Events:
    event: response.created
    data: {"type":"response.created","response":{"id":"resp_1",...}}

    event: response.output_text.delta
    data: {"type":"response.output_text.delta","item_id":"msg_1","delta":"Hello"}

    event: response.completed
    data: {"type":"response.completed","response":{...}}

Chat Completion Events:
    data: {"id":"resp_1","object":"chat.completion.chunk","choices":[{"delta":{"role":"assistant"}}]}
    data: {"id":"msg_1","object":"chat.completion.chunk","choices":[{"delta":{"content":"Hello"}}]}
    data: [DONE]
"""

import codecs
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, cast

from ..core.sse import DONE_FRAME, DONE_SENTINEL, SSEFrame, format_sse_data, parse_frame, split_frames
from ..types.chat import CHUNK_OBJECT, ROLE_ASSISTANT, ClientDeltaEvent, Delta
from ..types.responses import (
    EVENT_DEFAULT,
    EVENT_ERROR,
    EVENT_OUTPUT_TEXT_DELTA,
    EVENT_RESPONSE_COMPLETED,
    EVENT_RESPONSE_CREATED,
    EVENT_RESPONSE_FAILED,
    EVENT_RESPONSE_INCOMPLETE,
    OutputTextDeltaEvent,
    ResponseCreatedEvent,
)

logger = logging.getLogger("chatbridge")

FALLBACK_CHUNK_ID = "chatcmpl-unknown"

# Limits on text carried between frames/reads while waiting for the rest of it
DEFAULT_MAX_PENDING_CHARS = 1024 * 1024
DEFAULT_MAX_PENDING_FRAMES = 8

# Events that produce client output or end the turn
MAPPED_EVENTS = frozenset({EVENT_OUTPUT_TEXT_DELTA, EVENT_RESPONSE_CREATED, EVENT_RESPONSE_COMPLETED})

_UNPARSED = object()


def _try_parse(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _UNPARSED


def resolve_event_type(event_type: str, payload: Any) -> str:
    """Use the payload's ``type`` for frames that carried no event line."""
    if event_type == EVENT_DEFAULT and isinstance(payload, dict) and isinstance(payload.get("type"), str):
        return payload["type"]
    return event_type


def build_delta_event(chunk_id: str, delta: Delta) -> ClientDeltaEvent:
    """Build a chat completion chunk carrying a single delta."""
    return {
        "id": chunk_id,
        "object": CHUNK_OBJECT,
        "choices": [{"delta": delta}],
    }


class ResponsesToChatStreamAdapter:
    """Converts a responses SSE stream into chat completion chunks.

    The adapter is single-use and forward-only. Between reads it carries:
    - the text after the last frame delimiter (a frame still arriving)
    - a JSON payload that did not parse yet, with the event type it started
      under and the number of frames it has been carried across

    Both buffers are bounded; content exceeding the limits is dropped with a
    warning.
    """

    def __init__(
        self,
        max_pending_chars: int = DEFAULT_MAX_PENDING_CHARS,
        max_pending_frames: int = DEFAULT_MAX_PENDING_FRAMES,
    ):
        """Initialize the stream adapter.

        Args:
            max_pending_chars: Largest partial frame or JSON fragment kept
                while waiting for its remainder.
            max_pending_frames: Number of frames a JSON fragment may be
                carried across before it is treated as malformed.
        """
        self.max_pending_chars = max_pending_chars
        self.max_pending_frames = max_pending_frames

        self.partial_frame = ""
        self.pending_json = ""
        self.pending_event: Optional[str] = None
        self.pending_frames = 0

        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    async def adapt_stream(
        self,
        upstream: AsyncIterator[bytes],
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> AsyncIterator[bytes]:
        """Transform the backend stream into chat completion SSE frames.

        Upstream read errors propagate to the consumer and no ``[DONE]`` frame
        is sent. When the consumer stops early, no further reads are made and
        ``on_close`` releases the upstream connection.

        Args:
            upstream: Raw bytes of the backend's event stream
            on_close: Awaited once when the stream finishes for any reason

        Yields:
            Chat completion SSE frames as bytes
        """
        try:
            async for chunk in upstream:
                for event in self.feed(chunk):
                    yield event
            self.finish()
            yield DONE_FRAME
        finally:
            if on_close is not None:
                await on_close()
            else:
                aclose = getattr(upstream, "aclose", None)
                if aclose is not None:
                    await aclose()

    def feed(self, chunk: bytes) -> list[bytes]:
        """Process one read from the backend and return the frames to emit."""
        text = self.partial_frame + self._decoder.decode(chunk)
        frames, remainder = split_frames(text)

        if len(remainder) > self.max_pending_chars:
            logger.warning(
                "StreamAdapter: Dropping %d chars of unterminated frame data",
                len(remainder),
            )
            remainder = ""
        self.partial_frame = remainder

        output: list[bytes] = []
        for frame_text in frames:
            event = self._process_frame(parse_frame(frame_text))
            if event is not None:
                output.append(format_sse_data(event))
        return output

    def finish(self) -> None:
        """Discard whatever is still buffered when the backend stream ends."""
        tail = self.partial_frame + self._decoder.decode(b"", final=True)
        if tail.strip() or self.pending_json:
            logger.debug(
                "StreamAdapter: Stream ended with %d chars of partial frame and "
                "%d chars of pending JSON; discarding",
                len(tail),
                len(self.pending_json),
            )
        self.partial_frame = ""
        self._clear_pending()

    def _process_frame(self, frame: SSEFrame) -> Optional[ClientDeltaEvent]:
        if frame.data is None:
            return None
        data = frame.data.strip()
        if not data or data == DONE_SENTINEL:
            return None

        parsed = self._reassemble(frame, data)
        if parsed is None:
            return None
        event_type, payload = parsed
        return self._convert_event(event_type, payload)

    def _reassemble(self, frame: SSEFrame, data: str) -> Optional[tuple[str, Any]]:
        """Join ``data`` onto any pending fragment and try to parse it.

        Returns the event type and parsed payload, or None while the payload
        is still incomplete (or was dropped).
        """
        if not self.pending_json:
            payload = _try_parse(data)
            if payload is not _UNPARSED:
                return frame.event, payload
            self.pending_json = data
            self.pending_event = frame.event
            self.pending_frames = 1
            self._enforce_pending_limits()
            return None

        combined = self.pending_json + data
        payload = _try_parse(combined)
        if payload is not _UNPARSED:
            event_type = frame.event if frame.has_event_line else (self.pending_event or frame.event)
            self._clear_pending()
            return event_type, payload

        payload = _try_parse(data)
        if payload is not _UNPARSED:
            if resolve_event_type(frame.event, payload) not in MAPPED_EVENTS:
                # Unmapped events interleaved with a split payload leave it pending
                self.pending_frames += 1
                self._enforce_pending_limits()
                return frame.event, payload
            logger.warning(
                "StreamAdapter: Discarding %d chars of unresolved JSON before a complete payload",
                len(self.pending_json),
            )
            self._clear_pending()
            return frame.event, payload

        self.pending_json = combined
        self.pending_frames += 1
        self._enforce_pending_limits()
        return None

    def _enforce_pending_limits(self) -> None:
        if len(self.pending_json) > self.max_pending_chars:
            logger.warning(
                "StreamAdapter: Pending JSON exceeded %d chars; dropping it",
                self.max_pending_chars,
            )
            self._clear_pending()
        elif self.pending_frames > self.max_pending_frames:
            logger.warning(
                "StreamAdapter: JSON still unparsable after %d frames; dropping it: %s",
                self.max_pending_frames,
                self.pending_json[:100],
            )
            self._clear_pending()

    def _clear_pending(self) -> None:
        self.pending_json = ""
        self.pending_event = None
        self.pending_frames = 0

    def _convert_event(self, event_type: str, payload: Any) -> Optional[ClientDeltaEvent]:
        """Map one backend event onto a client chunk (or nothing)."""
        if not isinstance(payload, dict):
            return None

        event_type = resolve_event_type(event_type, payload)

        if event_type == EVENT_OUTPUT_TEXT_DELTA:
            delta_event = cast(OutputTextDeltaEvent, payload)
            return build_delta_event(
                delta_event.get("item_id") or FALLBACK_CHUNK_ID,
                {"content": delta_event.get("delta") or ""},
            )

        if event_type == EVENT_RESPONSE_CREATED:
            response = cast(ResponseCreatedEvent, payload).get("response")
            response_id = response.get("id") if isinstance(response, dict) else None
            return build_delta_event(response_id or FALLBACK_CHUNK_ID, {"role": ROLE_ASSISTANT})

        if event_type == EVENT_RESPONSE_COMPLETED:
            # The [DONE] frame signals completion to the client
            return None

        if event_type in (EVENT_ERROR, EVENT_RESPONSE_FAILED, EVENT_RESPONSE_INCOMPLETE):
            logger.warning("StreamAdapter: Backend reported %s: %s", event_type, payload)
            return None

        logger.debug("StreamAdapter: Skipping event type %s", event_type)
        return None


async def adapt_responses_stream(
    upstream: AsyncIterator[bytes],
    on_close: Optional[Callable[[], Awaitable[None]]] = None,
    **limits: int,
) -> AsyncIterator[bytes]:
    """Convenience function to adapt a responses stream.

    Args:
        upstream: Raw backend stream
        on_close: Awaited once when the stream finishes for any reason
        **limits: ``max_pending_chars`` / ``max_pending_frames`` overrides

    Yields:
        Chat completion SSE frames
    """
    adapter = ResponsesToChatStreamAdapter(**limits)
    async for event in adapter.adapt_stream(upstream, on_close=on_close):
        yield event

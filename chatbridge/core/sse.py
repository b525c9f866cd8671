"""SSE (Server-Sent Events) framing helpers."""

import json
from dataclasses import dataclass
from typing import Any, Optional

from ..types.responses import EVENT_DEFAULT

FRAME_DELIMITER = "\n\n"
DONE_SENTINEL = "[DONE]"
DONE_FRAME = f"data: {DONE_SENTINEL}\n\n".encode("utf-8")


@dataclass(frozen=True)
class SSEFrame:
    """One blank-line delimited unit of an event stream.

    Attributes:
        event: Value of the ``event:`` line, or ``"message"`` when absent.
        data: ``data:`` lines joined with newlines, or None when the frame
            carried no data line.
        has_event_line: Whether the frame named its event type explicitly.
    """

    event: str
    data: Optional[str]
    has_event_line: bool = False


def _field_value(line: str, prefix: str) -> str:
    value = line[len(prefix):]
    if value.startswith(" "):
        value = value[1:]
    return value


def parse_frame(text: str) -> SSEFrame:
    """Parse the text of a single frame (without its trailing blank line)."""
    event: Optional[str] = None
    data_lines: list[str] = []
    for line in text.split("\n"):
        if line.startswith("event:"):
            if event is None:
                event = _field_value(line, "event:").strip()
        elif line.startswith("data:"):
            data_lines.append(_field_value(line, "data:"))
    return SSEFrame(
        event=event or EVENT_DEFAULT,
        data="\n".join(data_lines) if data_lines else None,
        has_event_line=bool(event),
    )


def split_frames(text: str) -> tuple[list[str], str]:
    """Split text into complete frames and the trailing incomplete remainder.

    CRLF line endings are normalized first; empty frames are dropped.
    """
    normalized = text.replace("\r\n", "\n")
    parts = normalized.split(FRAME_DELIMITER)
    remainder = parts.pop()
    return [part for part in parts if part.strip()], remainder


def format_sse_data(payload: dict[str, Any]) -> bytes:
    """Serialize a payload as a single ``data:`` frame."""
    json_str = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return f"data: {json_str}\n\n".encode("utf-8")

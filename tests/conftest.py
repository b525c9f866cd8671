"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
from typing import Any, Callable, Generator

import httpx
import pytest

UPSTREAM_BASE = "http://upstream.local/v1"


# =============================================================================
# Transport Registry Fixtures
# =============================================================================


@pytest.fixture
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transport registry after test.

    Use this fixture in tests that register fake transports.
    """
    from chatbridge.core.upstream_transport import clear_upstream_transports

    yield
    clear_upstream_transports()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment keys from leaking into settings under test."""
    for name in (
        "OPENAI_API_KEY",
        "API_KEY",
        "CHATBRIDGE_HOST",
        "CHATBRIDGE_PORT",
        "CHATBRIDGE_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Configuration Builders
# =============================================================================


def build_bridge_config(
    base_url: str = UPSTREAM_BASE,
    *,
    upstream_key: str = "upstream-key",
    client_key: str | None = None,
    message_transforms: list[Any] | None = None,
    stream: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a config dict for ``create_app``.

    Args:
        base_url: Responses backend base URL
        upstream_key: Key sent to the backend
        client_key: Key clients must present; None disables auth
        message_transforms: Optional transform entries
        stream: Optional stream limits section

    Returns:
        Config dict
    """
    config: dict[str, Any] = {
        "upstream": {"api_base": base_url, "api_key": upstream_key},
        "auth": {"enabled": client_key is not None, "api_key": client_key or ""},
    }
    if message_transforms is not None:
        config["message_transforms"] = message_transforms
    if stream is not None:
        config["stream"] = stream
    return config


def sse_event(event: str, data: dict[str, Any]) -> bytes:
    """Encode one responses-style SSE frame."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n".encode("utf-8")


class RecordingUpstream:
    """Serves queued responses through an ``httpx.MockTransport`` and records requests."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Callable[[httpx.Request], httpx.Response]] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(500, json={"error": {"message": "no response queued"}})
        return self._responses.pop(0)(request)

    def enqueue_json(self, body: Any, status_code: int = 200) -> None:
        self._responses.append(lambda _req: httpx.Response(status_code, json=body))

    def enqueue_stream(self, chunks: list[bytes], status_code: int = 200) -> None:
        self._responses.append(
            lambda _req: httpx.Response(
                status_code,
                headers={"content-type": "text/event-stream"},
                stream=httpx.ByteStream(b"".join(chunks)),
            )
        )

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def fake_upstream(clear_transport_registry: None) -> RecordingUpstream:
    """Register a recording fake backend for ``upstream.local``."""
    from chatbridge.core.upstream_transport import register_upstream_transport

    upstream = RecordingUpstream()
    register_upstream_transport(UPSTREAM_BASE, upstream.transport)
    return upstream

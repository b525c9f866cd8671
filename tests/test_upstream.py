"""Tests for the responses backend client."""

import json

import httpx
import pytest

from chatbridge.core.exceptions import UpstreamError
from chatbridge.core.upstream import (
    DEFAULT_API_BASE,
    ResponsesBackend,
    build_backend,
    extract_error_message,
    format_httpx_error,
)
from chatbridge.core.upstream_transport import (
    get_upstream_transport,
    register_upstream_transport,
)

from conftest import UPSTREAM_BASE, sse_event

PAYLOAD = {"model": "gpt-4o", "input": [{"role": "user", "content": [{"type": "input_text", "text": "hi"}]}], "stream": False}


def _backend() -> ResponsesBackend:
    return build_backend("sk-test", base_url=UPSTREAM_BASE, timeout=5)


class TestTransportRegistry:
    def test_lookup_by_host(self, clear_transport_registry):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))
        register_upstream_transport("http://Upstream.Local:8080/v1", transport)
        assert get_upstream_transport("http://upstream.local:8080/v1/responses") is transport
        assert get_upstream_transport("http://other.local/v1") is None

    def test_register_requires_host(self):
        with pytest.raises(ValueError):
            register_upstream_transport("not a url", httpx.MockTransport(lambda r: httpx.Response(200)))


class TestBuildBackend:
    def test_defaults(self, caplog):
        backend = build_backend("")
        assert backend.url == f"{DEFAULT_API_BASE}/responses"
        assert backend.timeout == 60.0
        assert "No OpenAI API key" in caplog.text

    def test_trailing_slash(self):
        assert build_backend("k", base_url="http://h.local/v1/").url == "http://h.local/v1/responses"

    def test_headers(self):
        assert build_backend("sk").build_headers() == {
            "Content-Type": "application/json",
            "Authorization": "Bearer sk",
        }
        assert "Authorization" not in build_backend("").build_headers()


class TestErrorHelpers:
    def test_extract_error_message_prefers_backend_message(self):
        resp = httpx.Response(429)
        assert extract_error_message(resp, b'{"error":{"message":"slow down"}}') == "slow down"

    def test_extract_error_message_string_error(self):
        assert extract_error_message(httpx.Response(400), b'{"error":"bad"}') == "bad"

    def test_extract_error_message_falls_back_to_reason(self):
        assert extract_error_message(httpx.Response(503), b"<html>") == "Service Unavailable"

    def test_format_httpx_error_includes_timeout(self):
        message = format_httpx_error(httpx.ReadTimeout("timed out"), "http://h/v1/responses", 5)
        assert message.startswith("ReadTimeout")
        assert "url=http://h/v1/responses" in message
        assert "timeout=5s" in message


@pytest.mark.asyncio
async def test_create_response_returns_json(fake_upstream):
    fake_upstream.enqueue_json({"id": "resp_1", "output": []})
    result = await _backend().create_response(PAYLOAD)

    assert result == {"id": "resp_1", "output": []}
    request = fake_upstream.requests[-1]
    assert request.url == f"{UPSTREAM_BASE}/responses"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["Content-Type"] == "application/json"
    assert fake_upstream.last_json() == PAYLOAD


@pytest.mark.asyncio
async def test_create_response_error_status(fake_upstream):
    fake_upstream.enqueue_json({"error": {"message": "Invalid model"}}, status_code=400)
    with pytest.raises(UpstreamError) as exc_info:
        await _backend().create_response(PAYLOAD)
    assert exc_info.value.message == "OpenAI API error: Invalid model"
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_create_response_transport_error(clear_transport_registry):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    register_upstream_transport(UPSTREAM_BASE, httpx.MockTransport(handler))
    with pytest.raises(UpstreamError) as exc_info:
        await _backend().create_response(PAYLOAD)
    assert exc_info.value.message.startswith("OpenAI API error: ConnectError")
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_open_stream_yields_raw_bytes(fake_upstream):
    frame = sse_event("response.output_text.delta", {"item_id": "m", "delta": "x"})
    fake_upstream.enqueue_stream([frame])

    stream = await _backend().open_stream({**PAYLOAD, "stream": True})
    try:
        assert stream.status_code == 200
        body = b"".join([chunk async for chunk in stream.chunks()])
    finally:
        await stream.aclose()
    await stream.aclose()

    assert body == frame
    assert json.loads(fake_upstream.requests[-1].content)["stream"] is True


@pytest.mark.asyncio
async def test_open_stream_error_status(fake_upstream):
    fake_upstream.enqueue_json({"error": {"message": "Incorrect API key"}}, status_code=401)
    with pytest.raises(UpstreamError) as exc_info:
        await _backend().open_stream({**PAYLOAD, "stream": True})
    assert exc_info.value.message == "OpenAI API error: Incorrect API key"
    assert exc_info.value.status_code == 401

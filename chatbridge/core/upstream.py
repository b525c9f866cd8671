"""HTTP client for the responses backend."""

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ..types.responses import BackendPayload
from .exceptions import UpstreamError
from .upstream_transport import get_upstream_transport

logger = logging.getLogger("chatbridge")

DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = 60.0
RESPONSES_PATH = "/responses"


def format_httpx_error(exc: httpx.HTTPError, url: str, timeout: float) -> str:
    """Produce a user-facing description of an httpx transport error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)
    parts.append(f"url={url}")
    if isinstance(exc, httpx.TimeoutException):
        parts.append(f"timeout={timeout}s")
    return "; ".join(parts)


def extract_error_message(resp: httpx.Response, data: bytes) -> str:
    """Pick the backend's error message, falling back to the status text."""
    try:
        parsed = json.loads(data or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        parsed = None
    if isinstance(parsed, Mapping):
        error = parsed.get("error")
        if isinstance(error, Mapping):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        elif isinstance(error, str) and error:
            return error
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class UpstreamStream:
    """An open streaming response from the backend.

    Owns both the response and the client that produced it; ``aclose`` releases
    them and is safe to call more than once.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response, url: str) -> None:
        self._client = client
        self._response = response
        self._url = url
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def chunks(self) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing upstream stream for %s", self._url)
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


@dataclass
class ResponsesBackend:
    """The responses API endpoint the bridge forwards to."""

    api_key: str
    base_url: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{RESPONSES_PATH}"

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _encode(self, payload: BackendPayload) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    async def create_response(self, payload: BackendPayload) -> Any:
        """Send a non-streaming request and return the backend's JSON as-is."""
        url = self.url
        logger.debug("Sending non-streaming request to %s", url)
        transport = get_upstream_transport(url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=transport) as client:
            try:
                resp = await client.post(url, headers=self.build_headers(), content=self._encode(payload))
            except httpx.HTTPError as exc:
                message = format_httpx_error(exc, url, self.timeout)
                logger.error("Request to %s failed: %s", url, message)
                raise UpstreamError(f"OpenAI API error: {message}") from exc

        if resp.status_code >= 400:
            message = extract_error_message(resp, resp.content)
            logger.error("OpenAI API error details (status %s): %s", resp.status_code, resp.text[:2000])
            raise UpstreamError(f"OpenAI API error: {message}", status_code=resp.status_code)

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise UpstreamError(
                "OpenAI API error: backend returned a non-JSON body",
                status_code=resp.status_code,
            ) from exc

    async def open_stream(self, payload: BackendPayload) -> UpstreamStream:
        """Send a streaming request and return the open event stream.

        Non-success statuses are read fully, the connection is released and an
        UpstreamError is raised before any bytes reach the client.
        """
        url = self.url
        stream_timeout = httpx.Timeout(
            connect=self.timeout, read=None, write=self.timeout, pool=self.timeout
        )
        transport = get_upstream_transport(url)
        client = httpx.AsyncClient(timeout=stream_timeout, transport=transport)
        try:
            request = client.build_request(
                "POST", url, headers=self.build_headers(), content=self._encode(payload)
            )
            logger.debug("Sending streaming request to %s", url)
            resp = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            await client.aclose()
            message = format_httpx_error(exc, url, self.timeout)
            logger.error("Failed to send streaming request to %s: %s", url, message)
            raise UpstreamError(f"OpenAI API error: {message}") from exc
        except BaseException:
            await client.aclose()
            raise

        stream = UpstreamStream(client, resp, url)
        if resp.status_code >= 400:
            try:
                data = await resp.aread()
            finally:
                await stream.aclose()
            message = extract_error_message(resp, data)
            logger.error(
                "OpenAI API error details (status %s): %s",
                resp.status_code,
                data[:2000].decode("utf-8", errors="replace"),
            )
            raise UpstreamError(f"OpenAI API error: {message}", status_code=resp.status_code)

        logger.info("Streaming request to %s accepted, status %s", url, resp.status_code)
        return stream


def build_backend(
    api_key: str,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> ResponsesBackend:
    """Create a backend, applying defaults for unset values."""
    if not api_key:
        logger.warning("WARNING: No OpenAI API key provided")
    return ResponsesBackend(
        api_key=api_key,
        base_url=base_url or DEFAULT_API_BASE,
        timeout=timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT,
    )

"""Chat endpoint backed by the responses API."""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from ...responses.translator import build_backend_payload
from ..service import ChatService
from ..validation import parse_chat_request

logger = logging.getLogger("chatbridge")

ROOT_TEXT = "Down the Rabbit Hole"

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Cache-Control",
}


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


async def chat(request: Request) -> Response:
    """Chat endpoint.

    POST /api/chat

    Streams chat completion chunks when ``stream`` is true; otherwise returns
    the backend's JSON response unchanged.
    """
    service = get_chat_service(request)
    service.auth.validate(request.headers.get("Authorization"))

    body = await request.body()
    chat_request = parse_chat_request(body)

    original_count = len(chat_request["messages"])
    chat_request = {**chat_request, "messages": service.pipeline.apply(chat_request["messages"])}
    logger.info(
        "Messages transformed: original=%d transformed=%d",
        original_count,
        len(chat_request["messages"]),
    )

    if chat_request.get("stream"):
        logger.info("Generating streamed response")
        payload = build_backend_payload(
            chat_request, default_model=service.default_model, stream=True
        )
        upstream = await service.backend.open_stream(payload)
        adapter = service.new_stream_adapter()
        return StreamingResponse(
            adapter.adapt_stream(upstream.chunks(), on_close=upstream.aclose),
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
        )

    logger.info("Generating standard response")
    payload = build_backend_payload(chat_request, default_model=service.default_model)
    result = await service.backend.create_response(payload)
    return JSONResponse(content=result)


async def root() -> PlainTextResponse:
    """GET / - liveness text."""
    return PlainTextResponse(ROOT_TEXT)

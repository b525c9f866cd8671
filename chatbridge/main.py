"""FastAPI application for the chat bridge."""

import logging
from typing import Any, Mapping, Optional

from fastapi import FastAPI

from .api import ChatService, chat, register_error_handlers, root
from .auth import BearerAuth
from .config_loader import load_config
from .core.exceptions import ConfigurationError
from .core.upstream import build_backend
from .logging import RequestDebugMiddleware, setup_logging
from .modules import build_message_pipeline
from .settings import Settings

logger = logging.getLogger("chatbridge")


def build_chat_service(settings: Settings) -> ChatService:
    """Wire the backend, auth and message pipeline from resolved settings.

    Raises:
        ConfigurationError: Client auth is enabled without a key, or the
            backend URL is not http(s).
    """
    if not settings.upstream.api_base.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"upstream.api_base must be an http(s) URL, got {settings.upstream.api_base!r}"
        )
    if settings.auth.enabled and not settings.auth.api_key:
        raise ConfigurationError("auth.enabled is set but no client API key is configured")

    backend = build_backend(
        settings.upstream.api_key,
        base_url=settings.upstream.api_base,
        timeout=settings.upstream.timeout,
    )
    auth = BearerAuth(api_key=settings.auth.api_key, enabled=settings.auth.enabled)
    pipeline = build_message_pipeline(settings.message_transforms)
    logger.info("Message pipeline initialized with %d transforms", len(pipeline))
    return ChatService(
        backend=backend,
        pipeline=pipeline,
        auth=auth,
        default_model=settings.upstream.default_model,
        stream=settings.stream,
    )


def create_app(config: Optional[Mapping[str, Any]] = None) -> FastAPI:
    """Factory function to create the FastAPI application.

    Args:
        config: Parsed configuration. When omitted it is loaded from
            CHATBRIDGE_CONFIG or configs/config_default.yaml.

    Returns:
        The configured FastAPI application instance.
    """
    if config is None:
        config = load_config()
    settings = Settings.from_config(config)
    setup_logging(settings.logging.level)

    app = FastAPI(title="Chat Bridge")
    app.state.settings = settings
    app.state.chat_service = build_chat_service(settings)
    logger.info(
        "Forwarding chat requests to %s (auth %s)",
        app.state.chat_service.backend.url,
        "enabled" if settings.auth.enabled else "disabled",
    )

    app.add_middleware(
        RequestDebugMiddleware,
        verbose=settings.logging.debug_requests,
        include_headers=settings.logging.include_headers,
        include_body=settings.logging.include_body,
        max_body_length=settings.logging.max_body_length,
    )
    register_error_handlers(app)

    app.get("/")(root)
    app.post("/api/chat")(chat)

    return app


__all__ = ["build_chat_service", "create_app"]

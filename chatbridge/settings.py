"""Typed runtime settings resolved from the loaded configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .config_loader import ENV_PLACEHOLDER_RE
from .core.upstream import DEFAULT_API_BASE, DEFAULT_TIMEOUT
from .responses.stream_adapter import DEFAULT_MAX_PENDING_CHARS, DEFAULT_MAX_PENDING_FRAMES
from .responses.translator import DEFAULT_MODEL

logger = logging.getLogger("chatbridge")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_MAX_BODY_LENGTH = 10000


def _get(cfg: Mapping[str, Any], *keys: str) -> Any:
    cur: Any = cfg
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    value_str = str(value).strip().lower()
    if value_str in {"1", "true", "yes", "on"}:
        return True
    if value_str in {"0", "false", "no", "off"}:
        return False
    return None


def _to_secret(value: Any) -> str:
    """Return a configured secret, treating unresolved placeholders as unset."""
    if value is None:
        return ""
    text = str(value).strip()
    if ENV_PLACEHOLDER_RE.fullmatch(text):
        return ""
    return text


@dataclass(frozen=True)
class ServerSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass(frozen=True)
class UpstreamSettings:
    api_key: str = ""
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    default_model: str = DEFAULT_MODEL


@dataclass(frozen=True)
class AuthSettings:
    enabled: bool = False
    api_key: str = ""


@dataclass(frozen=True)
class StreamSettings:
    max_pending_chars: int = DEFAULT_MAX_PENDING_CHARS
    max_pending_frames: int = DEFAULT_MAX_PENDING_FRAMES


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    debug_requests: bool = False
    include_headers: bool = True
    include_body: bool = True
    max_body_length: int = DEFAULT_MAX_BODY_LENGTH


@dataclass(frozen=True)
class Settings:
    """Everything the application needs at start-up."""

    server: ServerSettings = field(default_factory=ServerSettings)
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    auth: AuthSettings = field(default_factory=AuthSettings)
    stream: StreamSettings = field(default_factory=StreamSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    message_transforms: Optional[tuple[Any, ...]] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Settings":
        """Resolve settings from a config mapping plus environment fallbacks.

        Environment variables: CHATBRIDGE_HOST and CHATBRIDGE_PORT override the
        server section; OPENAI_API_KEY and API_KEY are used when the config
        does not provide the upstream or client keys.
        """
        config = config or {}

        host = os.getenv("CHATBRIDGE_HOST") or _get(config, "server", "host")
        port = _to_int(os.getenv("CHATBRIDGE_PORT")) or _to_int(_get(config, "server", "port"))
        server = ServerSettings(
            host=str(host) if host else DEFAULT_HOST,
            port=port or DEFAULT_PORT,
        )

        upstream_key = _to_secret(_get(config, "upstream", "api_key")) or os.getenv("OPENAI_API_KEY", "")
        timeout = _to_float(_get(config, "upstream", "timeout"))
        upstream = UpstreamSettings(
            api_key=upstream_key,
            api_base=str(_get(config, "upstream", "api_base") or DEFAULT_API_BASE),
            timeout=timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT,
            default_model=str(_get(config, "upstream", "default_model") or DEFAULT_MODEL),
        )

        auth_key = _to_secret(_get(config, "auth", "api_key")) or os.getenv("API_KEY", "")
        auth_enabled = _to_bool(_get(config, "auth", "enabled"))
        if auth_enabled is None:
            auth_enabled = bool(auth_key)
        auth = AuthSettings(enabled=auth_enabled, api_key=auth_key)

        stream = StreamSettings(
            max_pending_chars=_to_int(_get(config, "stream", "max_pending_chars"))
            or DEFAULT_MAX_PENDING_CHARS,
            max_pending_frames=_to_int(_get(config, "stream", "max_pending_frames"))
            or DEFAULT_MAX_PENDING_FRAMES,
        )

        log_cfg = _get(config, "logging")
        if not isinstance(log_cfg, Mapping):
            log_cfg = {}
        logging_settings = LoggingSettings(
            level=str(log_cfg.get("level") or "INFO").upper(),
            debug_requests=bool(_to_bool(log_cfg.get("debug_requests"))),
            include_headers=_to_bool(log_cfg.get("include_headers")) is not False,
            include_body=_to_bool(log_cfg.get("include_body")) is not False,
            max_body_length=_to_int(log_cfg.get("max_body_length")) or DEFAULT_MAX_BODY_LENGTH,
        )

        transforms = config.get("message_transforms")
        if transforms is not None and not isinstance(transforms, list):
            logger.warning("message_transforms must be a list; ignoring %r", transforms)
            transforms = []

        return cls(
            server=server,
            upstream=upstream,
            auth=auth,
            stream=stream,
            logging=logging_settings,
            message_transforms=tuple(transforms) if transforms is not None else None,
        )

"""API module for the bridge."""

from .errors import register_error_handlers
from .routes import chat, root
from .service import ChatService

__all__ = ["ChatService", "chat", "register_error_handlers", "root"]

"""API routes for the bridge."""

from .chat import chat, root

__all__ = ["chat", "root"]

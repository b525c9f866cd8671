"""Authentication module for the bridge."""

from .bearer import BearerAuth

__all__ = ["BearerAuth"]

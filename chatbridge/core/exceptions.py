"""Core exceptions for the bridge."""

from typing import Optional


class ProxyError(Exception):
    """Base exception for bridge errors."""
    
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """Raised when there's an issue with the configuration."""
    pass


class InvalidRequestError(ProxyError):
    """Raised when an incoming request is invalid."""
    
    def __init__(self, message: str, code: str = "invalid_request") -> None:
        super().__init__(message)
        self.code = code


class AuthenticationError(ProxyError):
    """Raised when the bearer token is missing or wrong."""

    def __init__(self, message: str, code: str = "invalid_api_key") -> None:
        super().__init__(message)
        self.code = code


class UpstreamError(ProxyError):
    """Raised when the responses backend rejects a request or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

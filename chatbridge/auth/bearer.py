"""Bearer token authentication for the bridge's own API."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import AuthenticationError

logger = logging.getLogger("chatbridge")


@dataclass(frozen=True)
class BearerAuth:
    """Checks ``Authorization: Bearer <token>`` against the configured key.

    When disabled every request is accepted.
    """

    api_key: str = ""
    enabled: bool = False

    def validate(self, authorization: Optional[str]) -> None:
        """Validate an Authorization header value.

        Raises:
            AuthenticationError: The header is missing, malformed or the
                token does not match.
        """
        if not self.enabled:
            return

        if not authorization:
            logger.warning("Request rejected: missing Authorization header")
            raise AuthenticationError("Authorization header missing", code="missing_api_key")

        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme != "Bearer" or not token:
            logger.warning("Request rejected: malformed Authorization header")
            raise AuthenticationError(
                "Invalid authorization format. Use: Bearer TOKEN",
                code="invalid_auth_format",
            )

        if not hmac.compare_digest(token.encode("utf-8"), self.api_key.encode("utf-8")):
            logger.warning("Request rejected: invalid API key")
            raise AuthenticationError("Invalid API key", code="invalid_api_key")

"""Access token codec port interface."""

from typing import Any, Protocol
from uuid import UUID

from userguard.domain.entities.user import User


class AccessTokenPort(Protocol):
    """Issues and decodes short-lived bearer tokens for authenticated sessions."""

    def create_access_token(self, user: User, session_id: UUID) -> str:
        """
        Create a signed access token for a user's session.

        Returns:
            Encoded token string
        """
        ...

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token.

        Raises:
            InvalidAccessTokenError: If the token is invalid or expired
        """
        ...

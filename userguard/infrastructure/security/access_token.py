"""
JWT access tokens.

Access tokens are short-lived and self-contained: they carry the user id,
the session id and the user's role. Refresh tokens are opaque values
stored as hashes on the session and never go through this module.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from userguard.application.ports.outbound.access_token_port import AccessTokenPort
from userguard.core.clock import Clock, utc_now
from userguard.core.config import Settings
from userguard.domain.entities.user import User
from userguard.domain.exceptions import InvalidAccessTokenError

logger = logging.getLogger(__name__)

TOKEN_TYPE_ACCESS = "access"


class JoseAccessTokenCodec(AccessTokenPort):
    """python-jose implementation of AccessTokenPort."""

    def __init__(self, settings: Settings, clock: Clock = utc_now):
        self.secret_key = settings.secret_key
        self.algorithm = settings.jwt_algorithm
        self.lifetime = timedelta(minutes=settings.access_token_expire_minutes)
        self.clock = clock

    def create_access_token(self, user: User, session_id: UUID) -> str:
        """
        Create a JWT access token.

        Args:
            user: Authenticated user
            session_id: Session the token belongs to

        Returns:
            Encoded JWT token string
        """
        now = self.clock()
        claims = {
            "sub": str(user.id),
            "sid": str(session_id),
            "role": user.role.value,
            "superuser": user.is_superuser,
            "type": TOKEN_TYPE_ACCESS,
            "exp": now + self.lifetime,
            "iat": now,
            "jti": str(uuid.uuid4()),  # Unique JWT ID to ensure token uniqueness
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token.

        Verifies signature, expiration and token type.

        Raises:
            InvalidAccessTokenError: If token is invalid, expired, malformed
                or not an access token
        """
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise InvalidAccessTokenError(str(e)) from e

        if claims.get("type") != TOKEN_TYPE_ACCESS:
            raise InvalidAccessTokenError("wrong token type")
        return claims

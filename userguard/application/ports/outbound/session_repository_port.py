"""Session repository port interface."""

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from userguard.domain.entities.auth_session import AuthSession


class SessionRepositoryPort(Protocol):
    """Repository interface for AuthSession entity."""

    async def add(self, session: AuthSession) -> AuthSession:
        """Persist a new session."""
        ...

    async def get_by_refresh_token_hash(self, token_hash: str) -> Optional[AuthSession]:
        """
        Retrieve session by the SHA-256 digest of its refresh token.

        Returns:
            AuthSession entity if found, None otherwise
        """
        ...

    async def revoke(self, session_id: UUID, revoked_at: datetime) -> bool:
        """
        Revoke a single session.

        Returns:
            True if the session was live and is now revoked
        """
        ...

    async def revoke_family(self, family_id: UUID, revoked_at: datetime) -> int:
        """
        Revoke every live session in a rotation family.

        Used when refresh token reuse is detected.

        Returns:
            Number of sessions revoked
        """
        ...

    async def revoke_all_for_user(self, user_id: UUID, revoked_at: datetime) -> int:
        """
        Revoke all live sessions of a user.

        Used when the password changes.

        Returns:
            Number of sessions revoked
        """
        ...

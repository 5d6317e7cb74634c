"""Auth token repository port interface."""

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.value_objects.role import TokenPurpose


class AuthTokenRepositoryPort(Protocol):
    """Repository interface for single-use AuthToken entity."""

    async def add(self, token: AuthToken) -> AuthToken:
        """
        Add a new token.

        Args:
            token: AuthToken entity to add

        Returns:
            Created token entity

        Raises:
            ActiveTokenConflictError: If the user already holds an
                unconsumed token for the same purpose
        """
        ...

    async def get_by_token_hash(self, token_hash: str) -> Optional[AuthToken]:
        """
        Retrieve token by the SHA-256 digest of its value.

        Args:
            token_hash: SHA-256 hash of the token

        Returns:
            AuthToken entity if found, None otherwise
        """
        ...

    async def delete_active_for_user(self, user_id: UUID, purpose: TokenPurpose) -> int:
        """
        Delete the user's unconsumed tokens for a purpose.

        Returns:
            Number of tokens deleted
        """
        ...

    async def mark_consumed(self, token_id: UUID, consumed_at: datetime) -> bool:
        """
        Mark a token consumed if nobody consumed it first.

        Returns:
            True if this call consumed the token, False if it was already consumed
        """
        ...

    async def delete_expired(self, before_date: datetime) -> int:
        """
        Delete tokens that expired before a date.

        Args:
            before_date: Delete tokens that expired before this date

        Returns:
            Number of tokens deleted
        """
        ...

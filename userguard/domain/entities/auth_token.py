"""Single-use auth token entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from userguard.domain.exceptions import TokenAlreadyConsumedError
from userguard.domain.value_objects.role import TokenPurpose


@dataclass
class AuthToken:
    """
    A single-use, time-limited token bound to a user and a purpose.

    Only the SHA-256 digest of the token value is kept. The plain value is
    returned once, when the token is issued.
    """

    id: UUID
    user_id: UUID
    purpose: TokenPurpose
    token_hash: str
    issued_at: datetime
    expires_at: datetime
    consumed_at: datetime | None = None

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None

    def is_expired(self, now: datetime) -> bool:
        """A token is expired from its expiry instant onwards."""
        return now >= self.expires_at

    def consume(self, now: datetime) -> None:
        """
        Mark the token as used.

        Raises:
            TokenAlreadyConsumedError: If the token was already consumed
        """
        if self.is_consumed:
            raise TokenAlreadyConsumedError()
        self.consumed_at = now

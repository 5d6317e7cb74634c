"""Authenticated session entity."""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from userguard.domain.exceptions import InvalidSessionStateError


class SessionState(str, enum.Enum):
    """
    Session lifecycle.

    ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED -> LOGGED_OUT
    """

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    LOGGED_OUT = "logged_out"


@dataclass
class AuthSession:
    """
    A login session backed by a rotating refresh token.

    All sessions created from the same login share a family_id. Reusing a
    refresh token that was already rotated revokes the whole family.

    access_token and refresh_token are only populated on the instance
    returned by login, social login and refresh. They are never persisted.
    """

    id: UUID
    user_id: UUID
    family_id: UUID
    refresh_token_hash: str
    issued_at: datetime
    expires_at: datetime
    provider: str | None = None
    revoked_at: datetime | None = None
    state: SessionState = SessionState.ANONYMOUS
    access_token: str | None = field(default=None, repr=False, compare=False)
    refresh_token: str | None = field(default=None, repr=False, compare=False)

    @classmethod
    def open(
        cls,
        id: UUID,
        user_id: UUID,
        family_id: UUID,
        refresh_token_hash: str,
        issued_at: datetime,
        expires_at: datetime,
        provider: str | None = None,
    ) -> "AuthSession":
        """Create a session whose credentials are being checked."""
        session = cls(
            id=id,
            user_id=user_id,
            family_id=family_id,
            refresh_token_hash=refresh_token_hash,
            issued_at=issued_at,
            expires_at=expires_at,
            provider=provider,
        )
        session.begin_authentication()
        return session

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def begin_authentication(self) -> None:
        if self.state != SessionState.ANONYMOUS:
            raise InvalidSessionStateError(self.state.value, "begin authentication for")
        self.state = SessionState.AUTHENTICATING

    def complete_authentication(self, access_token: str, refresh_token: str) -> None:
        if self.state != SessionState.AUTHENTICATING:
            raise InvalidSessionStateError(self.state.value, "complete authentication for")
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.state = SessionState.AUTHENTICATED

    def log_out(self, at: datetime) -> None:
        if self.state != SessionState.AUTHENTICATED:
            raise InvalidSessionStateError(self.state.value, "log out")
        self.revoked_at = at
        self.state = SessionState.LOGGED_OUT
        self.access_token = None
        self.refresh_token = None

"""Session SQLAlchemy model for refresh token rotation."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base


class AuthSessionModel(Base):
    """
    Login session backed by a rotating refresh token.

    1. Login creates a session with a new family_id
    2. Refresh revokes the session and creates a new one in the same family
    3. Presenting a revoked session's refresh token revokes the whole family
    4. Logout revokes the session
    5. Password change revokes all of the user's sessions

    Attributes:
        user_id: Owning user
        family_id: Rotation chain identifier
        refresh_token_hash: SHA-256 hex digest of the refresh token
        provider: Social provider used to log in, NULL for local login
        issued_at, expires_at: Lifetime
        revoked_at: Set when the session ends
    """

    __tablename__ = "auth_sessions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    family_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    refresh_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
    )

    provider: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_auth_sessions_user_live", "user_id", "revoked_at"),
        Index("ix_auth_sessions_family", "family_id", "revoked_at"),
    )

    def __repr__(self) -> str:
        return (
            f"AuthSessionModel(id={self.id}, user_id={self.user_id}, "
            f"family_id={self.family_id}, revoked={self.revoked_at is not None})"
        )

"""Single-use auth token SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from userguard.domain.value_objects.role import TokenPurpose
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base


class AuthTokenModel(Base):
    """
    Password reset and email confirmation tokens.

    Security Features:
    - Tokens stored as SHA-256 hashes (database compromise doesn't leak tokens)
    - At most one unconsumed token per (user, purpose), enforced by a
      partial unique index
    - Consumption is a conditional UPDATE, so a token is redeemed once

    Attributes:
        user_id: Owning user
        purpose: reset_password or confirm_email
        token_hash: SHA-256 hex digest of the token value
        issued_at, expires_at: Lifetime
        consumed_at: Set when the token is redeemed
    """

    __tablename__ = "auth_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    purpose: Mapped[TokenPurpose] = mapped_column(
        Enum(
            TokenPurpose,
            name="token_purpose",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )

    token_hash: Mapped[str] = mapped_column(
        String(64),  # SHA-256 produces 64-character hex string
        nullable=False,
        unique=True,
    )

    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    consumed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        # One active token per (user, purpose)
        Index(
            "uq_auth_tokens_active_user_purpose",
            "user_id",
            "purpose",
            unique=True,
            postgresql_where=text("consumed_at IS NULL"),
        ),
        # Index for the expiry sweep
        Index("ix_auth_tokens_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return (
            f"AuthTokenModel(id={self.id}, user_id={self.user_id}, "
            f"purpose={self.purpose}, consumed={self.consumed_at is not None})"
        )

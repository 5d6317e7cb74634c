"""Social identity SQLAlchemy model."""

import uuid
from typing import Any

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.mixins import (
    TimestampMixin,
)


class SocialIdentityModel(Base, TimestampMixin):
    """
    Link between a user and a provider account.

    Attributes:
        provider: Lower-cased provider name
        external_id: Account id at the provider
        user_id: Owning user
        profile: Raw profile attributes captured at link time

    Constraints:
        - (provider, external_id) unique: an identity belongs to one user
        - (provider, user_id) unique: one identity per provider per user
    """

    __tablename__ = "social_identities"

    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    external_id: Mapped[str] = mapped_column(String(255), nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    profile: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )

    __table_args__ = (
        UniqueConstraint("provider", "external_id", name="uq_social_identities_provider_external_id"),
        UniqueConstraint("provider", "user_id", name="uq_social_identities_provider_user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"SocialIdentityModel(id={self.id}, provider={self.provider}, "
            f"external_id={self.external_id}, user_id={self.user_id})"
        )

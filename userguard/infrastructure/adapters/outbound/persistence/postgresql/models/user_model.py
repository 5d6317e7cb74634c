"""User SQLAlchemy model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from userguard.domain.value_objects.role import Role
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.mixins import TimestampMixin


class UserModel(Base, TimestampMixin):
    """
    User SQLAlchemy model.

    This is the ORM model for database persistence. Pure SQLAlchemy with no business logic.
    Business logic lives in domain.entities.user.User.

    Attributes:
        username: Unique, lower-cased username
        email: Unique email address, NULL when unknown
        password_hash: Argon2id digest, NULL for social-only accounts
        role: admin or user
        is_superuser: Superuser flag
        is_active: Whether the account can log in
        email_verified: Whether the email was confirmed
        first_name, last_name: Profile names
        last_login_at: Timestamp of last successful login

    Uniqueness of username and email is enforced by unique indexes, which
    is what makes concurrent registrations of the same name safe.
    PostgreSQL allows any number of NULL emails under a unique index.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
    )

    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=Role.USER,
    )

    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"UserModel(id={self.id}, username={self.username}, email={self.email})"

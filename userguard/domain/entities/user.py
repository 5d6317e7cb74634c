"""User domain entity."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from userguard.domain.exceptions import InvalidUserStateTransitionError
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import Role
from userguard.domain.value_objects.username import Username


@dataclass
class User:
    """
    User entity representing an account.

    A user authenticates either with a local password or through a linked
    social identity. Accounts created by social login have no password
    hash until the user sets one.
    """

    id: UUID
    username: Username
    password_hash: PasswordHash | None = None
    email: Email | None = None
    role: Role = Role.USER
    is_superuser: bool = False
    is_active: bool = True
    email_verified: bool = False
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate user after initialization."""
        for name in ("first_name", "last_name"):
            value = getattr(self, name)
            if value is not None and len(value) > 100:
                raise ValueError(f"{name} cannot exceed 100 characters")

    @property
    def display_name(self) -> str:
        """First name when known, otherwise the username."""
        if self.first_name and self.first_name.strip():
            return self.first_name.strip()
        return self.username.value

    @property
    def has_usable_password(self) -> bool:
        return self.password_hash is not None

    def activate(self) -> None:
        """
        Activate this user account.

        Raises:
            InvalidUserStateTransitionError: If user is already active
        """
        if self.is_active:
            raise InvalidUserStateTransitionError("active", "activate")
        self.is_active = True

    def deactivate(self) -> None:
        """
        Deactivate this user account.

        Raises:
            InvalidUserStateTransitionError: If user is already inactive
        """
        if not self.is_active:
            raise InvalidUserStateTransitionError("inactive", "deactivate")
        self.is_active = False

    def change_role(self, role: Role) -> None:
        self.role = role

    def set_superuser(self, flag: bool) -> None:
        self.is_superuser = flag

    def change_password(self, new_password_hash: PasswordHash) -> None:
        """
        Change user password.

        Args:
            new_password_hash: New password hash
        """
        self.password_hash = new_password_hash

    def verify_email(self) -> None:
        """Mark the email address as confirmed."""
        self.email_verified = True

    def record_login(self, at: datetime | None = None) -> None:
        """Record that user logged in."""
        self.last_login_at = at or datetime.now(UTC)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

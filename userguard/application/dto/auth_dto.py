"""Authentication DTOs (Data Transfer Objects)."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from userguard.domain.entities.user import User
from userguard.domain.value_objects.role import Role, TokenPurpose


class RegisterUserInput(BaseModel):
    """Input DTO for self-registration."""

    username: str = Field(..., min_length=3, max_length=50, description="Username")
    password: str = Field(..., min_length=1, description="Plaintext password")
    email: Optional[EmailStr] = Field(None, description="User's email address")
    first_name: Optional[str] = Field(None, max_length=100, description="First name")
    last_name: Optional[str] = Field(None, max_length=100, description="Last name")

    model_config = {"frozen": True}


class LoginInput(BaseModel):
    """Input DTO for local login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="User's password")

    model_config = {"frozen": True}


class UserProfileOutput(BaseModel):
    """Output DTO for user profile information."""

    id: UUID = Field(..., description="User's unique identifier")
    username: str = Field(..., description="Username")
    email: Optional[str] = Field(None, description="User's email address")
    display_name: str = Field(..., description="First name, or username when unknown")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    role: Role = Field(..., description="Account role")
    is_superuser: bool = Field(..., description="Whether user is a superuser")
    is_active: bool = Field(..., description="Whether user account is active")
    email_verified: bool = Field(..., description="Whether the email was confirmed")
    has_password: bool = Field(..., description="Whether a local password is set")
    created_at: Optional[datetime] = Field(None, description="Account creation timestamp")
    last_login_at: Optional[datetime] = Field(None, description="Last successful login")

    model_config = {"frozen": True, "from_attributes": True}

    @classmethod
    def from_entity(cls, user: User) -> "UserProfileOutput":
        """
        Create DTO from User entity.

        Args:
            user: User domain entity

        Returns:
            UserProfileOutput DTO
        """
        return cls(
            id=user.id,
            username=user.username.value,
            email=user.email.value if user.email else None,
            display_name=user.display_name,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_superuser=user.is_superuser,
            is_active=user.is_active,
            email_verified=user.email_verified,
            has_password=user.has_usable_password,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class IssuedToken(BaseModel):
    """
    A freshly issued single-use token.

    value is the only copy of the plain token. Deliver it to the user
    (mailer, link) and discard it.
    """

    value: str = Field(..., repr=False, description="Plain token value")
    purpose: TokenPurpose = Field(..., description="What the token may be redeemed for")
    user_id: UUID = Field(..., description="Owner of the token")
    issued_at: datetime = Field(..., description="Issue timestamp")
    expires_at: datetime = Field(..., description="Expiry timestamp")

    model_config = {"frozen": True}


class TokenValidation(BaseModel):
    """Result of a successful token validation or consumption."""

    user_id: UUID
    purpose: TokenPurpose

    model_config = {"frozen": True}


class RegistrationResult(BaseModel):
    """Output of registration."""

    user: UserProfileOutput
    confirmation_token: Optional[IssuedToken] = Field(
        None, description="Email confirmation token when validation is required"
    )

    model_config = {"frozen": True}


class LoginProvider(BaseModel):
    """A provider that can be offered as a login option."""

    provider: str
    label: str
    redirect_uri: str

    model_config = {"frozen": True}


class ProviderConnection(BaseModel):
    """Whether a user has linked a provider that supports account linking."""

    provider: str
    label: str
    connected: bool
    link_uri: Optional[str] = None

    model_config = {"frozen": True}

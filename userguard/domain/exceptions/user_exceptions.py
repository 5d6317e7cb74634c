"""User and credential domain exceptions."""

from userguard.domain.exceptions.base import DomainException


class UserDomainException(DomainException):
    """Base exception for user-related domain errors."""


class InvalidEmailError(UserDomainException):
    """Raised when an email address is invalid."""

    def __init__(self, email: str):
        super().__init__(
            message=f"Invalid email format: {email}",
            code="INVALID_EMAIL"
        )


class InvalidUsernameError(UserDomainException):
    """Raised when a username is invalid."""

    def __init__(self, username: str, reason: str):
        self.username = username
        super().__init__(
            message=f"Invalid username '{username}': {reason}",
            code="INVALID_USERNAME"
        )


class UsernameAlreadyExistsError(UserDomainException):
    """Raised when a username is already taken."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(
            message=f"Username already exists: {username}",
            code="USERNAME_ALREADY_EXISTS"
        )


class EmailAlreadyExistsError(UserDomainException):
    """Raised when an email address is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(
            message=f"Email already exists: {email}",
            code="EMAIL_ALREADY_EXISTS"
        )


class UserNotFoundError(UserDomainException):
    """Raised when a user cannot be found."""

    def __init__(self, identifier: str):
        super().__init__(
            message=f"User not found: {identifier}",
            code="USER_NOT_FOUND"
        )


class AccountInactiveError(UserDomainException):
    """Raised when an inactive account attempts to authenticate."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(
            message=f"Account is inactive: {user_id}",
            code="ACCOUNT_INACTIVE"
        )


class InvalidCredentialsError(UserDomainException):
    """
    Raised when a login attempt fails.

    The message is deliberately identical for unknown usernames, wrong
    passwords and accounts without a local password.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Invalid username or password",
            code="INVALID_CREDENTIALS"
        )


class InvalidPasswordError(UserDomainException):
    """Raised when a password hash is malformed."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid password: {reason}",
            code="INVALID_PASSWORD"
        )


class WeakPasswordError(UserDomainException):
    """Raised when a plaintext password fails the strength policy."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            message=f"Password does not meet requirements: {reason}",
            code="WEAK_PASSWORD"
        )


class InvalidUserStateTransitionError(UserDomainException):
    """Raised when attempting an invalid state transition."""

    def __init__(self, current_state: str, attempted_transition: str):
        super().__init__(
            message=f"Cannot {attempted_transition} user in state: {current_state}",
            code="INVALID_USER_STATE_TRANSITION"
        )


class RegistrationDisabledError(UserDomainException):
    """Raised when self-registration is turned off."""

    def __init__(self) -> None:
        super().__init__(
            message="Registration is disabled",
            code="REGISTRATION_DISABLED"
        )

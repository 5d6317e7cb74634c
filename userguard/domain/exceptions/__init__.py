"""Domain exceptions package."""

from userguard.domain.exceptions.base import DomainException
from userguard.domain.exceptions.social_exceptions import (
    ProviderAlreadyLinkedToUserError,
    SocialAccountAlreadyLinkedError,
    SocialDomainException,
    SocialIdentityNotFoundError,
    SocialLoginDisabledError,
)
from userguard.domain.exceptions.token_exceptions import (
    ActiveTokenConflictError,
    InvalidAccessTokenError,
    InvalidSessionStateError,
    SessionExpiredError,
    SessionNotFoundError,
    SessionRevokedError,
    TokenAlreadyConsumedError,
    TokenDomainException,
    TokenExpiredError,
    TokenNotFoundError,
)
from userguard.domain.exceptions.user_exceptions import (
    AccountInactiveError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidPasswordError,
    InvalidUserStateTransitionError,
    InvalidUsernameError,
    RegistrationDisabledError,
    UserDomainException,
    UsernameAlreadyExistsError,
    UserNotFoundError,
    WeakPasswordError,
)

__all__ = [
    # Base
    "DomainException",
    # User exceptions
    "UserDomainException",
    "InvalidEmailError",
    "InvalidUsernameError",
    "UsernameAlreadyExistsError",
    "EmailAlreadyExistsError",
    "UserNotFoundError",
    "AccountInactiveError",
    "InvalidCredentialsError",
    "InvalidPasswordError",
    "WeakPasswordError",
    "InvalidUserStateTransitionError",
    "RegistrationDisabledError",
    # Token exceptions
    "TokenDomainException",
    "ActiveTokenConflictError",
    "InvalidAccessTokenError",
    "TokenNotFoundError",
    "TokenExpiredError",
    "TokenAlreadyConsumedError",
    "SessionNotFoundError",
    "SessionRevokedError",
    "SessionExpiredError",
    "InvalidSessionStateError",
    # Social exceptions
    "SocialDomainException",
    "SocialIdentityNotFoundError",
    "SocialAccountAlreadyLinkedError",
    "ProviderAlreadyLinkedToUserError",
    "SocialLoginDisabledError",
]

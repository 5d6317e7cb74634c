"""Token and session domain exceptions."""

from uuid import UUID

from userguard.domain.exceptions.base import DomainException


class TokenDomainException(DomainException):
    """Base exception for token and session errors."""


class TokenNotFoundError(TokenDomainException):
    """Raised when a token value does not match any live token."""

    def __init__(self) -> None:
        super().__init__(
            message="Token not found",
            code="TOKEN_NOT_FOUND"
        )


class TokenExpiredError(TokenDomainException):
    """Raised when a token exists but its lifetime has elapsed."""

    def __init__(self, user_id: UUID, purpose: str):
        self.user_id = user_id
        self.purpose = purpose
        super().__init__(
            message=f"Token for {purpose} has expired",
            code="TOKEN_EXPIRED"
        )


class TokenAlreadyConsumedError(TokenDomainException):
    """Raised when a single-use token is presented a second time."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has already been used",
            code="TOKEN_ALREADY_CONSUMED"
        )


class SessionNotFoundError(TokenDomainException):
    """Raised when a refresh token does not match any session."""

    def __init__(self) -> None:
        super().__init__(
            message="Session not found",
            code="SESSION_NOT_FOUND"
        )


class SessionRevokedError(TokenDomainException):
    """Raised when a revoked session's refresh token is reused."""

    def __init__(self, family_id: UUID):
        self.family_id = family_id
        super().__init__(
            message="Session has been revoked",
            code="SESSION_REVOKED"
        )


class SessionExpiredError(TokenDomainException):
    """Raised when a session's refresh token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Session has expired",
            code="SESSION_EXPIRED"
        )


class InvalidSessionStateError(TokenDomainException):
    """Raised when a session transition is not allowed from its current state."""

    def __init__(self, current_state: str, attempted_transition: str):
        super().__init__(
            message=f"Cannot {attempted_transition} session in state: {current_state}",
            code="INVALID_SESSION_STATE"
        )


class ActiveTokenConflictError(TokenDomainException):
    """Raised when a concurrent issue already stored an active token for the same purpose."""

    def __init__(self, user_id: UUID, purpose: str):
        self.user_id = user_id
        self.purpose = purpose
        super().__init__(
            message=f"User {user_id} already holds an active {purpose} token",
            code="ACTIVE_TOKEN_CONFLICT"
        )


class InvalidAccessTokenError(TokenDomainException):
    """Raised when an access token cannot be decoded or has expired."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid access token: {reason}",
            code="INVALID_ACCESS_TOKEN"
        )

"""
Authentication lifecycle events.

Events are notifications, not part of the transaction that triggered them.
"before" events are emitted before the primary write starts, "after" events
once it has committed.
"""

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Mapping
from uuid import UUID


class AuthEvent(str, enum.Enum):
    """Lifecycle points at which subscribers are notified."""

    BEFORE_REGISTER = "before_register"
    AFTER_REGISTER = "after_register"
    AFTER_LOGIN = "after_login"
    BEFORE_LOGOUT = "before_logout"
    AFTER_LOGOUT = "after_logout"
    AFTER_CHANGE_PASSWORD = "after_change_password"
    BEFORE_SOCIAL_LOGIN_USER_CREATE = "before_social_login_user_create"
    ON_EXPIRED_TOKEN = "on_expired_token"
    AFTER_RESEND_TOKEN_VALIDATION = "after_resend_token_validation"


@dataclass(frozen=True)
class AuthEventPayload:
    """
    What a subscriber receives.

    Attributes:
        event: Which lifecycle point fired
        user_id: Acting user, None when no user exists yet
        context: Event-specific details (username, provider, session id...)
        occurred_at: When the event was emitted (UTC)
    """

    event: AuthEvent
    user_id: UUID | None = None
    context: Mapping[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

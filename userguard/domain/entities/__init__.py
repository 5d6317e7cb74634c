"""Domain entities."""

from userguard.domain.entities.auth_session import AuthSession, SessionState
from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.entities.social_identity import SocialIdentity, normalize_provider
from userguard.domain.entities.user import User

__all__ = [
    "AuthSession",
    "AuthToken",
    "SessionState",
    "SocialIdentity",
    "User",
    "normalize_provider",
]

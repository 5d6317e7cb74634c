"""Entity ↔ model mappers."""

from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.auth_session_mapper import (
    AuthSessionMapper,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.auth_token_mapper import (
    AuthTokenMapper,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.social_identity_mapper import (
    SocialIdentityMapper,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.user_mapper import (
    UserMapper,
)

__all__ = ["AuthSessionMapper", "AuthTokenMapper", "SocialIdentityMapper", "UserMapper"]

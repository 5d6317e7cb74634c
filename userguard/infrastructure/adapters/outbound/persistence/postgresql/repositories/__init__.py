"""PostgreSQL repositories."""

from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.auth_token_repository import (
    PostgresAuthTokenRepository,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.session_repository import (
    PostgresSessionRepository,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.social_identity_repository import (
    PostgresSocialIdentityRepository,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.user_repository import (
    PostgresUserRepository,
)

__all__ = [
    "PostgresAuthTokenRepository",
    "PostgresSessionRepository",
    "PostgresSocialIdentityRepository",
    "PostgresUserRepository",
]

"""SQLAlchemy models. Importing this package registers every table on Base.metadata."""

from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_session_model import (
    AuthSessionModel,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_token_model import (
    AuthTokenModel,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.social_identity_model import (
    SocialIdentityModel,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.user_model import (
    UserModel,
)

__all__ = [
    "AuthSessionModel",
    "AuthTokenModel",
    "Base",
    "SocialIdentityModel",
    "UserModel",
]

"""
Mapper between AuthToken domain entity and AuthTokenModel.

The database stores token_hash (SHA-256), never the plain token, and so does
the entity. The plain value only exists in the IssuedToken returned at issue
time.
"""

from typing import Optional

from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.value_objects.role import TokenPurpose
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_token_model import AuthTokenModel


class AuthTokenMapper:
    """Mapper between AuthToken entity and AuthTokenModel."""

    @staticmethod
    def to_entity(model: AuthTokenModel) -> AuthToken:
        return AuthToken(
            id=model.id,
            user_id=model.user_id,
            purpose=TokenPurpose(model.purpose),
            token_hash=model.token_hash,
            issued_at=model.issued_at,
            expires_at=model.expires_at,
            consumed_at=model.consumed_at,
        )

    @staticmethod
    def to_model(
        entity: AuthToken,
        existing_model: Optional[AuthTokenModel] = None,
    ) -> AuthTokenModel:
        if existing_model is not None:
            # Consumption is the only update a token receives
            existing_model.consumed_at = entity.consumed_at
            return existing_model

        return AuthTokenModel(
            id=entity.id,
            user_id=entity.user_id,
            purpose=entity.purpose,
            token_hash=entity.token_hash,
            issued_at=entity.issued_at,
            expires_at=entity.expires_at,
            consumed_at=entity.consumed_at,
        )

"""Mapper between AuthSession domain entity and AuthSessionModel."""

from typing import Optional

from userguard.domain.entities.auth_session import AuthSession, SessionState
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_session_model import AuthSessionModel


class AuthSessionMapper:
    """
    Mapper between AuthSession entity and AuthSessionModel.

    The runtime state is not stored: a loaded session is AUTHENTICATED
    while live and LOGGED_OUT once revoked. Tokens are never loaded.
    """

    @staticmethod
    def to_entity(model: AuthSessionModel) -> AuthSession:
        return AuthSession(
            id=model.id,
            user_id=model.user_id,
            family_id=model.family_id,
            refresh_token_hash=model.refresh_token_hash,
            issued_at=model.issued_at,
            expires_at=model.expires_at,
            provider=model.provider,
            revoked_at=model.revoked_at,
            state=(
                SessionState.LOGGED_OUT
                if model.revoked_at is not None
                else SessionState.AUTHENTICATED
            ),
        )

    @staticmethod
    def to_model(
        entity: AuthSession,
        existing_model: Optional[AuthSessionModel] = None,
    ) -> AuthSessionModel:
        if existing_model is not None:
            existing_model.revoked_at = entity.revoked_at
            return existing_model

        return AuthSessionModel(
            id=entity.id,
            user_id=entity.user_id,
            family_id=entity.family_id,
            refresh_token_hash=entity.refresh_token_hash,
            provider=entity.provider,
            issued_at=entity.issued_at,
            expires_at=entity.expires_at,
            revoked_at=entity.revoked_at,
        )

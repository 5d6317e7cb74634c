"""PostgreSQL implementation of AuthTokenRepositoryPort."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userguard.application.ports.outbound.auth_token_repository_port import (
    AuthTokenRepositoryPort,
)
from userguard.domain.entities.auth_token import AuthToken
from userguard.domain.exceptions import ActiveTokenConflictError
from userguard.domain.value_objects.role import TokenPurpose
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.auth_token_mapper import AuthTokenMapper
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_token_model import AuthTokenModel
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.base_repository import (
    BaseRepository,
    violated_constraint,
)


class PostgresAuthTokenRepository(
    BaseRepository[AuthTokenModel, AuthToken], AuthTokenRepositoryPort
):
    """PostgreSQL implementation of AuthTokenRepositoryPort."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, AuthTokenModel, AuthTokenMapper)

    def translate_integrity_error(self, entity: AuthToken, exc: IntegrityError) -> Exception:
        if "active_user_purpose" in violated_constraint(exc):
            return ActiveTokenConflictError(entity.user_id, entity.purpose.value)
        return exc

    async def get_by_token_hash(self, token_hash: str) -> Optional[AuthToken]:
        """
        Retrieve token by token hash.

        Args:
            token_hash: SHA-256 hash of the token

        Returns:
            AuthToken entity if found, None otherwise
        """
        stmt = select(AuthTokenModel).where(AuthTokenModel.token_hash == token_hash)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def delete_active_for_user(self, user_id: UUID, purpose: TokenPurpose) -> int:
        stmt = delete(AuthTokenModel).where(
            AuthTokenModel.user_id == user_id,
            AuthTokenModel.purpose == purpose,
            AuthTokenModel.consumed_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def mark_consumed(self, token_id: UUID, consumed_at: datetime) -> bool:
        stmt = (
            update(AuthTokenModel)
            .where(
                AuthTokenModel.id == token_id,
                AuthTokenModel.consumed_at.is_(None),
            )
            .values(consumed_at=consumed_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def delete_expired(self, before_date: datetime) -> int:
        """
        Delete tokens that expired before a date.

        This is typically run as a scheduled job to keep the table small.

        Returns:
            Number of tokens deleted
        """
        stmt = delete(AuthTokenModel).where(AuthTokenModel.expires_at < before_date)
        result = await self.session.execute(stmt)
        return result.rowcount

"""PostgreSQL implementation of SessionRepositoryPort."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from userguard.application.ports.outbound.session_repository_port import (
    SessionRepositoryPort,
)
from userguard.domain.entities.auth_session import AuthSession
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.auth_session_mapper import (
    AuthSessionMapper,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.auth_session_model import (
    AuthSessionModel,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.base_repository import (
    BaseRepository,
)


class PostgresSessionRepository(
    BaseRepository[AuthSessionModel, AuthSession], SessionRepositoryPort
):
    """PostgreSQL implementation of SessionRepositoryPort."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, AuthSessionModel, AuthSessionMapper)

    async def get_by_refresh_token_hash(self, token_hash: str) -> Optional[AuthSession]:
        stmt = select(AuthSessionModel).where(AuthSessionModel.refresh_token_hash == token_hash)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def revoke(self, session_id: UUID, revoked_at: datetime) -> bool:
        revoked = await self._revoke_where(AuthSessionModel.id == session_id, revoked_at=revoked_at)
        return revoked == 1

    async def revoke_family(self, family_id: UUID, revoked_at: datetime) -> int:
        return await self._revoke_where(
            AuthSessionModel.family_id == family_id, revoked_at=revoked_at
        )

    async def revoke_all_for_user(self, user_id: UUID, revoked_at: datetime) -> int:
        return await self._revoke_where(AuthSessionModel.user_id == user_id, revoked_at=revoked_at)

    async def _revoke_where(self, criterion, revoked_at: datetime) -> int:
        stmt = (
            update(AuthSessionModel)
            .where(criterion, AuthSessionModel.revoked_at.is_(None))
            .values(revoked_at=revoked_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

"""PostgreSQL implementation of SocialIdentityRepositoryPort."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userguard.application.ports.outbound.social_identity_repository_port import (
    SocialIdentityRepositoryPort,
)
from userguard.domain.entities.social_identity import SocialIdentity
from userguard.domain.exceptions import (
    ProviderAlreadyLinkedToUserError,
    SocialAccountAlreadyLinkedError,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.social_identity_mapper import (
    SocialIdentityMapper,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.social_identity_model import (
    SocialIdentityModel,
)
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.base_repository import (
    BaseRepository,
    violated_constraint,
)


class PostgresSocialIdentityRepository(
    BaseRepository[SocialIdentityModel, SocialIdentity], SocialIdentityRepositoryPort
):
    """PostgreSQL implementation of SocialIdentityRepositoryPort."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, SocialIdentityModel, SocialIdentityMapper)

    def translate_integrity_error(
        self, entity: SocialIdentity, exc: IntegrityError
    ) -> Exception:
        constraint = violated_constraint(exc)
        if "provider_user_id" in constraint:
            return ProviderAlreadyLinkedToUserError(entity.provider)
        if "provider_external_id" in constraint:
            return SocialAccountAlreadyLinkedError(entity.provider, entity.external_id)
        return exc

    async def get_by_provider_identity(
        self, provider: str, external_id: str
    ) -> Optional[SocialIdentity]:
        stmt = select(SocialIdentityModel).where(
            SocialIdentityModel.provider == provider,
            SocialIdentityModel.external_id == external_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def get_by_user_and_provider(
        self, user_id: UUID, provider: str
    ) -> Optional[SocialIdentity]:
        stmt = select(SocialIdentityModel).where(
            SocialIdentityModel.user_id == user_id,
            SocialIdentityModel.provider == provider,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def list_by_user(self, user_id: UUID) -> list[SocialIdentity]:
        stmt = (
            select(SocialIdentityModel)
            .where(SocialIdentityModel.user_id == user_id)
            .order_by(SocialIdentityModel.provider)
        )
        result = await self.session.execute(stmt)
        return [self.mapper.to_entity(model) for model in result.scalars().all()]

"""Mapper between SocialIdentity entity and SocialIdentityModel."""

from typing import Optional

from userguard.domain.entities.social_identity import SocialIdentity
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.social_identity_model import (
    SocialIdentityModel,
)


class SocialIdentityMapper:
    """Mapper between SocialIdentity entity and SocialIdentityModel."""

    @staticmethod
    def to_entity(model: SocialIdentityModel) -> SocialIdentity:
        return SocialIdentity(
            id=model.id,
            user_id=model.user_id,
            provider=model.provider,
            external_id=model.external_id,
            profile=dict(model.profile or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_model(
        entity: SocialIdentity,
        existing_model: Optional[SocialIdentityModel] = None,
    ) -> SocialIdentityModel:
        if existing_model is not None:
            # Only the profile snapshot changes after linking
            existing_model.profile = dict(entity.profile)
            return existing_model

        model = SocialIdentityModel(
            id=entity.id,
            user_id=entity.user_id,
            provider=entity.provider,
            external_id=entity.external_id,
            profile=dict(entity.profile),
        )
        if entity.created_at is not None:
            model.created_at = entity.created_at
        return model

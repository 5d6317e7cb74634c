"""
Social identity linker service.

Maintains the mapping between users and their accounts at external
identity providers, and reports which providers can be offered for login
and for linking.
"""

import logging
from typing import Any
from uuid import UUID, uuid4

from userguard.application.dto.auth_dto import LoginProvider, ProviderConnection
from userguard.application.ports.outbound.unit_of_work_port import (
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from userguard.core.clock import Clock, utc_now
from userguard.core.config import Settings
from userguard.domain.entities.social_identity import SocialIdentity, normalize_provider
from userguard.domain.exceptions import (
    ProviderAlreadyLinkedToUserError,
    SocialAccountAlreadyLinkedError,
    SocialIdentityNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class SocialIdentityLinker:
    """Service for linking provider identities to users."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings,
        clock: Clock = utc_now,
    ):
        self.uow_factory = uow_factory
        self.settings = settings
        self.clock = clock

    async def link(
        self,
        user_id: UUID,
        provider: str,
        external_id: str,
        profile: dict[str, Any] | None = None,
    ) -> SocialIdentity:
        """
        Link a provider identity to a user.

        Linking the same (provider, external_id) to the same user again is a
        no-op that returns the existing link.

        Raises:
            UserNotFoundError: If the user does not exist
            SocialAccountAlreadyLinkedError: If another user owns the identity
            ProviderAlreadyLinkedToUserError: If the user already has a
                different identity at this provider
        """
        async with self.uow_factory() as uow:
            identity = await self.link_in(uow, user_id, provider, external_id, profile)
            await uow.commit()
        return identity

    async def link_in(
        self,
        uow: UnitOfWorkPort,
        user_id: UUID,
        provider: str,
        external_id: str,
        profile: dict[str, Any] | None = None,
    ) -> SocialIdentity:
        """Link inside an open unit of work."""
        candidate = SocialIdentity(
            id=uuid4(),
            user_id=user_id,
            provider=provider,
            external_id=external_id,
            profile=dict(profile or {}),
            created_at=self.clock(),
        )

        existing = await self._check_link(uow, candidate)
        if existing is not None:
            return existing

        if await uow.users.get_by_id(user_id) is None:
            raise UserNotFoundError(str(user_id))

        try:
            identity = await uow.social_identities.add(candidate)
        except (SocialAccountAlreadyLinkedError, ProviderAlreadyLinkedToUserError):
            # Lost a race against a concurrent link; report what won
            existing = await self._check_link(uow, candidate)
            if existing is not None:
                return existing
            raise

        logger.info(
            f"Linked {identity.provider} identity {identity.external_id} to user {user_id}"
        )
        return identity

    async def _check_link(
        self, uow: UnitOfWorkPort, candidate: SocialIdentity
    ) -> SocialIdentity | None:
        """Return the identical existing link, raise on a conflicting one."""
        existing = await uow.social_identities.get_by_provider_identity(
            candidate.provider, candidate.external_id
        )
        if existing is not None:
            if existing.user_id == candidate.user_id:
                return existing
            logger.warning(
                f"Link refused: {candidate.provider}:{candidate.external_id} "
                f"belongs to user {existing.user_id}"
            )
            raise SocialAccountAlreadyLinkedError(candidate.provider, candidate.external_id)

        current = await uow.social_identities.get_by_user_and_provider(
            candidate.user_id, candidate.provider
        )
        if current is not None:
            logger.warning(
                f"Link refused: user {candidate.user_id} already linked to {candidate.provider}"
            )
            raise ProviderAlreadyLinkedToUserError(candidate.provider)

        return None

    async def find_by_provider_identity(self, provider: str, external_id: str) -> UUID:
        """
        Resolve the user linked to a provider identity.

        Raises:
            SocialIdentityNotFoundError: If no user is linked
        """
        async with self.uow_factory() as uow:
            identity = await self.find_in(uow, provider, external_id)

        if identity is None:
            raise SocialIdentityNotFoundError(normalize_provider(provider), external_id)
        return identity.user_id

    async def find_in(
        self, uow: UnitOfWorkPort, provider: str, external_id: str
    ) -> SocialIdentity | None:
        return await uow.social_identities.get_by_provider_identity(
            normalize_provider(provider), str(external_id).strip()
        )

    async def unlink(self, user_id: UUID, provider: str) -> None:
        """
        Remove a user's link to a provider.

        Raises:
            SocialIdentityNotFoundError: If the user has no link to the provider
        """
        provider = normalize_provider(provider)
        async with self.uow_factory() as uow:
            identity = await uow.social_identities.get_by_user_and_provider(user_id, provider)
            if identity is None:
                raise SocialIdentityNotFoundError(provider)
            await uow.social_identities.delete(identity.id)
            await uow.commit()

        logger.info(f"Unlinked {provider} from user {user_id}")

    async def list_for_user(self, user_id: UUID) -> set[str]:
        """Names of the providers linked to a user."""
        async with self.uow_factory() as uow:
            identities = await uow.social_identities.list_by_user(user_id)
        return {identity.provider for identity in identities}

    def login_providers(self) -> list[LoginProvider]:
        """Providers that can be offered as login options."""
        return [
            LoginProvider(
                provider=name,
                label=provider.label or name.capitalize(),
                redirect_uri=provider.redirect_uri,
            )
            for name, provider in sorted(self.settings.login_providers.items())
        ]

    async def connection_states(self, user_id: UUID) -> list[ProviderConnection]:
        """
        Linking state of every provider that supports account linking.

        Empty when social login is disabled.
        """
        linkable = {
            name: provider
            for name, provider in self.settings.login_providers.items()
            if provider.supports_linking
        }
        if not linkable:
            return []

        linked = await self.list_for_user(user_id)
        return [
            ProviderConnection(
                provider=name,
                label=provider.label or name.capitalize(),
                connected=name in linked,
                link_uri=None if name in linked else provider.link_social_uri,
            )
            for name, provider in sorted(linkable.items())
        ]

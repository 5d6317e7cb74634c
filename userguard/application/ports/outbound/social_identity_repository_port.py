"""Social identity repository port interface."""

from typing import Optional, Protocol
from uuid import UUID

from userguard.domain.entities.social_identity import SocialIdentity


class SocialIdentityRepositoryPort(Protocol):
    """Repository interface for SocialIdentity entity."""

    async def add(self, identity: SocialIdentity) -> SocialIdentity:
        """
        Add a new social identity.

        Raises:
            SocialAccountAlreadyLinkedError: If (provider, external_id) or
                (provider, user_id) is already taken
        """
        ...

    async def get_by_provider_identity(
        self, provider: str, external_id: str
    ) -> Optional[SocialIdentity]:
        """Retrieve the identity for a provider account, if linked."""
        ...

    async def get_by_user_and_provider(
        self, user_id: UUID, provider: str
    ) -> Optional[SocialIdentity]:
        """Retrieve the identity a user holds for a provider, if any."""
        ...

    async def list_by_user(self, user_id: UUID) -> list[SocialIdentity]:
        """List all identities linked to a user."""
        ...

    async def delete(self, identity_id: UUID) -> None:
        """
        Delete an identity.

        Raises:
            NotFoundError: If identity doesn't exist
        """
        ...

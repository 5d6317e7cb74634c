"""Social identity domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass
class SocialIdentity:
    """
    Link between a user and an account at an external identity provider.

    Invariants (enforced by the store):
    - (provider, external_id) belongs to at most one user
    - a user has at most one identity per provider
    """

    id: UUID
    user_id: UUID
    provider: str
    external_id: str
    profile: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.provider = normalize_provider(self.provider)
        if not self.external_id or not str(self.external_id).strip():
            raise ValueError("External id cannot be empty")
        self.external_id = str(self.external_id).strip()

    @property
    def key(self) -> tuple[str, str]:
        return self.provider, self.external_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SocialIdentity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


def normalize_provider(provider: str) -> str:
    """Provider names are compared lower-cased and stripped."""
    normalized = (provider or "").strip().lower()
    if not normalized:
        raise ValueError("Provider cannot be empty")
    return normalized

"""Outbound ports."""

from userguard.application.ports.outbound.access_token_port import AccessTokenPort
from userguard.application.ports.outbound.auth_token_repository_port import (
    AuthTokenRepositoryPort,
)
from userguard.application.ports.outbound.event_dispatcher_port import EventDispatcherPort
from userguard.application.ports.outbound.password_hasher_port import PasswordHasherPort
from userguard.application.ports.outbound.session_repository_port import (
    SessionRepositoryPort,
)
from userguard.application.ports.outbound.social_identity_repository_port import (
    SocialIdentityRepositoryPort,
)
from userguard.application.ports.outbound.unit_of_work_port import (
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from userguard.application.ports.outbound.user_repository_port import UserRepositoryPort

__all__ = [
    "AccessTokenPort",
    "AuthTokenRepositoryPort",
    "EventDispatcherPort",
    "PasswordHasherPort",
    "SessionRepositoryPort",
    "SocialIdentityRepositoryPort",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
    "UserRepositoryPort",
]

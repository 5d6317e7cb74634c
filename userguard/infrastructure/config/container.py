"""
Service container.

Wires the PostgreSQL adapters, the security adapters and the event
dispatcher into the application services. Hosts build one container at
startup and close it at shutdown.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from userguard.application.exceptions import ValidationError
from userguard.application.ports.outbound.unit_of_work_port import UnitOfWorkFactory
from userguard.application.services import (
    AuthenticationService,
    CredentialStore,
    SocialIdentityLinker,
    TokenIssuer,
)
from userguard.core.clock import Clock, utc_now
from userguard.core.config import Settings
from userguard.infrastructure.adapters.outbound.persistence.postgresql.unit_of_work import (
    PostgresUnitOfWork,
)
from userguard.infrastructure.config.database import DatabaseConfig
from userguard.infrastructure.events.dispatcher import EventDispatcher
from userguard.infrastructure.security.access_token import JoseAccessTokenCodec
from userguard.infrastructure.security.password_hasher import Argon2PasswordHasher

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Fully wired services sharing one database engine."""

    settings: Settings
    database: DatabaseConfig
    dispatcher: EventDispatcher
    password_hasher: Argon2PasswordHasher
    access_tokens: JoseAccessTokenCodec
    uow_factory: UnitOfWorkFactory
    credential_store: CredentialStore
    token_issuer: TokenIssuer
    linker: SocialIdentityLinker
    auth_service: AuthenticationService

    async def close(self) -> None:
        """Dispose of the database engine."""
        await self.database.close()


def build_container(
    settings: Settings,
    dispatcher: Optional[EventDispatcher] = None,
    database: Optional[DatabaseConfig] = None,
    clock: Clock = utc_now,
) -> Container:
    """
    Build the service graph from settings.

    Args:
        settings: Userguard settings
        dispatcher: Dispatcher with host subscribers already registered;
            a fresh one is created when omitted
        database: Pre-built database configuration (tests)
        clock: Time source shared by every service

    Raises:
        ValidationError: If social login is enabled without any provider
            that can be used for login
    """
    if settings.social_login_enabled and not settings.login_providers:
        raise ValidationError(
            "Social login is enabled but no provider has a client id and redirect URI",
            field="oauth_providers",
            constraint="login_provider_required",
        )

    database = database or DatabaseConfig.from_settings(settings)
    dispatcher = dispatcher or EventDispatcher()
    password_hasher = Argon2PasswordHasher(settings)
    access_tokens = JoseAccessTokenCodec(settings, clock=clock)

    def uow_factory() -> PostgresUnitOfWork:
        return PostgresUnitOfWork(database.session_factory)

    credential_store = CredentialStore(uow_factory)
    token_issuer = TokenIssuer(uow_factory, dispatcher, clock=clock)
    linker = SocialIdentityLinker(uow_factory, settings, clock=clock)
    auth_service = AuthenticationService(
        uow_factory,
        credential_store,
        token_issuer,
        linker,
        password_hasher,
        access_tokens,
        dispatcher,
        settings,
        clock=clock,
    )

    logger.debug(f"Container built for {settings.app_name} ({settings.environment})")
    return Container(
        settings=settings,
        database=database,
        dispatcher=dispatcher,
        password_hasher=password_hasher,
        access_tokens=access_tokens,
        uow_factory=uow_factory,
        credential_store=credential_store,
        token_issuer=token_issuer,
        linker=linker,
        auth_service=auth_service,
    )

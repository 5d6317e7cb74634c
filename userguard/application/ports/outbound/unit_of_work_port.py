"""Unit of Work port interface."""

from typing import Callable, Protocol

from userguard.application.ports.outbound.auth_token_repository_port import (
    AuthTokenRepositoryPort,
)
from userguard.application.ports.outbound.session_repository_port import (
    SessionRepositoryPort,
)
from userguard.application.ports.outbound.social_identity_repository_port import (
    SocialIdentityRepositoryPort,
)
from userguard.application.ports.outbound.user_repository_port import UserRepositoryPort


class UnitOfWorkPort(Protocol):
    """
    Unit of Work interface for managing transactions.

    All repository operations within one unit of work are committed or
    rolled back together.

    Usage:
        async with uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            user.activate()
            await uow.users.update(user)
            await uow.commit()

        # On exception, automatic rollback occurs
    """

    users: UserRepositoryPort
    social_identities: SocialIdentityRepositoryPort
    auth_tokens: AuthTokenRepositoryPort
    sessions: SessionRepositoryPort

    async def __aenter__(self) -> "UnitOfWorkPort":
        """
        Enter async context manager (begin transaction).

        Returns:
            Self (UnitOfWorkPort instance)
        """
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Exit context manager (commit or rollback).

        If an exception occurred, the transaction is rolled back.
        Otherwise, the transaction is committed.
        """
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...


# Services receive a factory and open one unit of work per operation
UnitOfWorkFactory = Callable[[], UnitOfWorkPort]

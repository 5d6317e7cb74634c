"""
PostgreSQL implementation of Unit of Work pattern.

Each unit of work owns one AsyncSession for its lifetime. All repositories
share that session, so everything done inside one async with block is
committed or rolled back together.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from userguard.application.ports.outbound.unit_of_work_port import UnitOfWorkPort
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories import (
    PostgresAuthTokenRepository,
    PostgresSessionRepository,
    PostgresSocialIdentityRepository,
    PostgresUserRepository,
)


class PostgresUnitOfWork(UnitOfWorkPort):
    """
    PostgreSQL implementation of Unit of Work pattern.

    Usage:
        uow_factory = lambda: PostgresUnitOfWork(db_config.session_factory)

        async with uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            user.activate()
            await uow.users.update(user)
            await uow.commit()

        # On exception, automatic rollback occurs

    Attributes:
        users: User repository
        social_identities: Social identity repository
        auth_tokens: Single-use token repository
        sessions: Refresh session repository
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize Unit of Work.

        Args:
            session_factory: Creates the session opened on enter
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        """Open a session and bind the repositories to it."""
        session = self._session_factory()
        self._session = session

        self.users = PostgresUserRepository(session)
        self.social_identities = PostgresSocialIdentityRepository(session)
        self.auth_tokens = PostgresAuthTokenRepository(session)
        self.sessions = PostgresSessionRepository(session)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Roll back if the block raised, commit otherwise, then close the session.
        """
        try:
            if exc_type is not None:
                await self.rollback()
            else:
                await self.commit()
        finally:
            await self.close()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._require_session().commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        await self._require_session().rollback()

    async def close(self) -> None:
        """Close the database session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work used outside of its context")
        return self._session

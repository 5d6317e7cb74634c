"""PostgreSQL implementation of UserRepositoryPort."""

from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userguard.application.ports.outbound.user_repository_port import UserRepositoryPort
from userguard.domain.entities.user import User
from userguard.domain.exceptions import EmailAlreadyExistsError, UsernameAlreadyExistsError
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.username import Username
from userguard.infrastructure.adapters.outbound.persistence.postgresql.mappers.user_mapper import UserMapper
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.user_model import UserModel
from userguard.infrastructure.adapters.outbound.persistence.postgresql.repositories.base_repository import (
    BaseRepository,
    violated_constraint,
)


class PostgresUserRepository(BaseRepository[UserModel, User], UserRepositoryPort):
    """
    PostgreSQL implementation of UserRepositoryPort.

    Inherits common CRUD operations from BaseRepository and implements
    User-specific lookups.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, UserModel, UserMapper)

    def translate_integrity_error(self, entity: User, exc: IntegrityError) -> Exception:
        constraint = violated_constraint(exc)
        if "email" in constraint and entity.email is not None:
            return EmailAlreadyExistsError(entity.email.value)
        if "username" in constraint:
            return UsernameAlreadyExistsError(entity.username.value)
        return exc

    async def get_by_username(self, username: Username) -> Optional[User]:
        """
        Retrieve user by username.

        Args:
            username: User's username value object

        Returns:
            User entity if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.username == username.value)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def get_by_email(self, email: Email) -> Optional[User]:
        """
        Retrieve user by email address.

        Args:
            email: User's email value object

        Returns:
            User entity if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.email == email.value)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self.mapper.to_entity(model)

    async def exists_by_username(self, username: Username) -> bool:
        stmt = select(exists().where(UserModel.username == username.value))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def exists_by_email(self, email: Email) -> bool:
        stmt = select(exists().where(UserModel.email == email.value))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

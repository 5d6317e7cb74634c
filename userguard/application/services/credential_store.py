"""
Credential store service.

Owns user records: creation with unique usernames, lookups and the
administrative mutations (role, superuser flag, activation, password hash).
"""

import logging
from typing import Callable
from uuid import UUID

from userguard.application.ports.outbound.unit_of_work_port import (
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from userguard.domain.entities.user import User
from userguard.domain.exceptions import (
    EmailAlreadyExistsError,
    InvalidUsernameError,
    UsernameAlreadyExistsError,
    UserNotFoundError,
)
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import Role
from userguard.domain.value_objects.username import Username

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Service for persisting and mutating users.

    Every public method opens its own unit of work. The ``*_in`` variants
    take an open unit of work so callers can compose them with other writes
    in a single transaction.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        """
        Initialize credential store.

        Args:
            uow_factory: Callable returning a fresh unit of work
        """
        self.uow_factory = uow_factory

    async def create(self, user: User) -> User:
        """
        Persist a new user.

        Args:
            user: User entity to create

        Returns:
            Created user

        Raises:
            UsernameAlreadyExistsError: If the username is taken
            EmailAlreadyExistsError: If the email is taken
        """
        async with self.uow_factory() as uow:
            created = await self.create_in(uow, user)
            await uow.commit()

        logger.info(f"User created: {created.id} ({created.username})")
        return created

    async def create_in(self, uow: UnitOfWorkPort, user: User) -> User:
        """
        Persist a new user inside an open unit of work.

        The pre-checks give a clear error in the common case. A concurrent
        insert that slips past them is rejected by the unique indexes and
        reported by the repository with the same exceptions.
        """
        if await uow.users.exists_by_username(user.username):
            logger.warning(f"User creation failed: username taken {user.username}")
            raise UsernameAlreadyExistsError(user.username.value)

        if user.email is not None and await uow.users.exists_by_email(user.email):
            logger.warning(f"User creation failed: email taken {user.email}")
            raise EmailAlreadyExistsError(user.email.value)

        return await uow.users.add(user)

    async def find_by_username(self, username: str) -> User:
        """
        Look up a user by username (case-insensitive).

        Raises:
            UserNotFoundError: If no such user exists
        """
        async with self.uow_factory() as uow:
            user = await self.find_by_username_in(uow, username)
        return user

    async def find_by_username_in(self, uow: UnitOfWorkPort, username: str) -> User:
        try:
            name = Username(username)
        except InvalidUsernameError:
            # A malformed name cannot match any stored user
            raise UserNotFoundError(username) from None

        user = await uow.users.get_by_username(name)
        if user is None:
            raise UserNotFoundError(username)
        return user

    async def get(self, user_id: UUID) -> User:
        """
        Look up a user by id.

        Raises:
            UserNotFoundError: If no such user exists
        """
        async with self.uow_factory() as uow:
            user = await self.get_in(uow, user_id)
        return user

    async def get_in(self, uow: UnitOfWorkPort, user_id: UUID) -> User:
        user = await uow.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def update_role(self, user_id: UUID, role: Role) -> User:
        """Assign a role to a user."""
        updated = await self._mutate(user_id, lambda user: user.change_role(Role(role)))
        logger.info(f"Role of user {user_id} set to {updated.role.value}")
        return updated

    async def set_superuser(self, user_id: UUID, flag: bool) -> User:
        """Grant or revoke the superuser flag."""
        updated = await self._mutate(user_id, lambda user: user.set_superuser(flag))
        logger.info(f"Superuser flag of user {user_id} set to {flag}")
        return updated

    async def deactivate(self, user_id: UUID) -> User:
        """
        Deactivate an account. Users are never physically deleted.

        Raises:
            UserNotFoundError: If no such user exists
            InvalidUserStateTransitionError: If the user is already inactive
        """
        updated = await self._mutate(user_id, lambda user: user.deactivate())
        logger.info(f"User deactivated: {user_id}")
        return updated

    async def activate(self, user_id: UUID) -> User:
        """
        Re-activate an account.

        Raises:
            UserNotFoundError: If no such user exists
            InvalidUserStateTransitionError: If the user is already active
        """
        updated = await self._mutate(user_id, lambda user: user.activate())
        logger.info(f"User activated: {user_id}")
        return updated

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> User:
        """Replace a user's stored password digest."""
        digest = PasswordHash(password_hash)
        return await self._mutate(user_id, lambda user: user.change_password(digest))

    async def _mutate(self, user_id: UUID, change: Callable[[User], None]) -> User:
        async with self.uow_factory() as uow:
            user = await self.get_in(uow, user_id)
            change(user)
            updated = await uow.users.update(user)
            await uow.commit()
        return updated

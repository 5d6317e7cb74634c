"""User repository port interface."""

from typing import Optional, Protocol
from uuid import UUID

from userguard.domain.entities.user import User
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.username import Username


class UserRepositoryPort(Protocol):
    """Repository interface for User entity."""

    async def add(self, user: User) -> User:
        """
        Add a new user to the repository.

        Args:
            user: User entity to add

        Returns:
            Created user entity with updated metadata

        Raises:
            UsernameAlreadyExistsError: If the username is taken
            EmailAlreadyExistsError: If the email is taken
        """
        ...

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """
        Retrieve user by ID.

        Args:
            user_id: User's unique identifier

        Returns:
            User entity if found, None otherwise
        """
        ...

    async def get_by_username(self, username: Username) -> Optional[User]:
        """
        Retrieve user by username.

        Args:
            username: User's username value object

        Returns:
            User entity if found, None otherwise
        """
        ...

    async def get_by_email(self, email: Email) -> Optional[User]:
        """
        Retrieve user by email address.

        Args:
            email: User's email value object

        Returns:
            User entity if found, None otherwise
        """
        ...

    async def exists_by_username(self, username: Username) -> bool:
        """
        Check if a user with this username exists.

        Args:
            username: Username to check

        Returns:
            True if user exists, False otherwise
        """
        ...

    async def exists_by_email(self, email: Email) -> bool:
        """
        Check if a user with this email exists.

        Args:
            email: Email to check

        Returns:
            True if user exists, False otherwise
        """
        ...

    async def update(self, user: User) -> User:
        """
        Update an existing user.

        Args:
            user: User entity with updated data

        Returns:
            Updated user entity

        Raises:
            NotFoundError: If user doesn't exist
        """
        ...

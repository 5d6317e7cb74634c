"""
Mapper between User domain entity and UserModel database model.

- to_entity(): Convert SQLAlchemy model → Domain entity
- to_model(): Convert Domain entity → SQLAlchemy model

This is the only place where user entity ↔ model conversion happens.
"""

from typing import Optional

from userguard.domain.entities.user import User
from userguard.domain.value_objects.email import Email
from userguard.domain.value_objects.password_hash import PasswordHash
from userguard.domain.value_objects.role import Role
from userguard.domain.value_objects.username import Username
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.user_model import UserModel


class UserMapper:
    """Mapper between User entity (value objects) and UserModel (primitives)."""

    @staticmethod
    def to_entity(model: UserModel) -> User:
        """
        Convert SQLAlchemy model to domain entity.

        Args:
            model: UserModel from database

        Returns:
            User domain entity
        """
        return User(
            id=model.id,
            username=Username(model.username),
            email=Email(model.email) if model.email else None,
            password_hash=PasswordHash(model.password_hash) if model.password_hash else None,
            role=Role(model.role),
            is_superuser=model.is_superuser,
            is_active=model.is_active,
            email_verified=model.email_verified,
            first_name=model.first_name,
            last_name=model.last_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )

    @staticmethod
    def to_model(entity: User, existing_model: Optional[UserModel] = None) -> UserModel:
        """
        Convert domain entity to SQLAlchemy model.

        Args:
            entity: User domain entity
            existing_model: Optional existing model to update (for updates)

        Returns:
            UserModel for database persistence
        """
        model = existing_model if existing_model is not None else UserModel(id=entity.id)

        model.username = entity.username.value
        model.email = entity.email.value if entity.email else None
        model.password_hash = entity.password_hash.value if entity.password_hash else None
        model.role = entity.role
        model.is_superuser = entity.is_superuser
        model.is_active = entity.is_active
        model.email_verified = entity.email_verified
        model.first_name = entity.first_name
        model.last_name = entity.last_name
        model.last_login_at = entity.last_login_at
        if existing_model is None and entity.created_at is not None:
            model.created_at = entity.created_at
        return model

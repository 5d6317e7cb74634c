"""
Base repository class for common database operations.

This provides generic CRUD operations that all repositories inherit:
- Entity ↔ Model conversion via mappers
- Inserts guarded by a savepoint, so a unique-constraint violation becomes
  a domain exception and leaves the surrounding transaction usable
"""

from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userguard.application.exceptions import NotFoundError
from userguard.infrastructure.adapters.outbound.persistence.postgresql.models.base import Base

# Type variables for generic repository
TModel = TypeVar("TModel", bound=Base)  # SQLAlchemy model type
TEntity = TypeVar("TEntity")  # Domain entity type


class BaseRepository(Generic[TModel, TEntity]):
    """
    Base repository providing common CRUD operations.

    Type Parameters:
        TModel: SQLAlchemy model type (e.g., UserModel)
        TEntity: Domain entity type (e.g., User)

    Usage:
        class PostgresUserRepository(BaseRepository[UserModel, User]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, UserModel, UserMapper)
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: Type[TModel],
        mapper_class,  # Type is Any to avoid circular imports
    ):
        """
        Initialize base repository.

        Args:
            session: SQLAlchemy async session
            model_class: SQLAlchemy model class
            mapper_class: Mapper class with to_entity() and to_model() methods
        """
        self.session = session
        self.model_class = model_class
        self.mapper = mapper_class

    async def add(self, entity: TEntity) -> TEntity:
        """
        Add a new entity to the database.

        Args:
            entity: Domain entity to persist

        Returns:
            Created entity with updated metadata

        Raises:
            Whatever translate_integrity_error() maps a constraint violation to
        """
        model = self.mapper.to_model(entity)
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError as exc:
            raise self.translate_integrity_error(entity, exc) from exc

        await self.session.refresh(model)
        return self.mapper.to_entity(model)

    def translate_integrity_error(self, entity: TEntity, exc: IntegrityError) -> Exception:
        """Map a constraint violation on insert to a domain exception."""
        return exc

    async def get_by_id(self, entity_id: UUID) -> Optional[TEntity]:
        """
        Retrieve entity by ID.

        Args:
            entity_id: Entity's unique identifier

        Returns:
            Domain entity if found, None otherwise
        """
        model = await self._get_model(entity_id)
        if model is None:
            return None
        return self.mapper.to_entity(model)

    async def update(self, entity: TEntity) -> TEntity:
        """
        Update existing entity.

        Args:
            entity: Domain entity with updated data

        Returns:
            Updated entity

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity_id = entity.id  # type: ignore  # All entities have id
        existing_model = await self._get_model(entity_id)

        if existing_model is None:
            raise NotFoundError(
                f"{self.model_class.__name__} with id {entity_id} not found",
                resource_type=self.model_class.__name__,
                resource_id=str(entity_id),
            )

        updated_model = self.mapper.to_model(entity, existing_model=existing_model)
        await self.session.flush()
        await self.session.refresh(updated_model)

        return self.mapper.to_entity(updated_model)

    async def delete(self, entity_id: UUID) -> None:
        """
        Hard delete entity from database.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        model = await self._get_model(entity_id)

        if model is None:
            raise NotFoundError(
                f"{self.model_class.__name__} with id {entity_id} not found",
                resource_type=self.model_class.__name__,
                resource_id=str(entity_id),
            )

        await self.session.delete(model)
        await self.session.flush()

    async def _get_model(self, entity_id: UUID) -> Optional[TModel]:
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


def violated_constraint(exc: IntegrityError) -> str:
    """
    Name of the violated constraint, or "" when it cannot be determined.

    asyncpg reports it on the driver exception; the message text is the
    fallback for other drivers.
    """
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    return str(orig or exc)

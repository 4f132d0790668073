"""Base repository implementation for infrastructure layer."""

import logging

from typing import Any, TypeVar

from sqlalchemy import delete
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.base import BaseEntity
from src.domain.repositories.base import BaseRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.constraint_errors import classify_constraint_error


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseEntity)


class BaseRepositoryImpl(BaseRepository[T]):
    """Generic CRUD on one ORM-mapped table.

    Every repository of a unit of work shares the same AsyncSession, so
    ``create`` only flushes; committing is left to the unit of work.

    Type Parameters:
        T: Domain entity type that extends BaseEntity

    Attributes:
        session: Database session shared with the unit of work
        entity_class: Domain entity class for type conversions
        model_class: Database model class for ORM operations

    Note:
        Subclasses must implement _to_entity() and _to_model()
    """

    def __init__(
        self,
        session: AsyncSession,
        entity_class: type[T],
        model_class: type[Any],
    ):
        self.session = session
        self.entity_class = entity_class
        self.model_class = model_class

    async def get_by_id(self, entity_id: int) -> T | None:
        """Get entity by ID."""
        try:
            result = await self.session.get(self.model_class, entity_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error getting {self.model_class.__name__}: {e}")
            raise DatabaseError(
                f"Failed to get {self.entity_class.__name__}",
                {"id": entity_id, "error": str(e)},
            ) from e
        if result:
            return self._to_entity(result)
        return None

    async def create(self, entity: T) -> T:
        """Create a new entity.

        Raises:
            ConstraintViolationException: If the row breaks a constraint
            DatabaseError: On any other database failure
        """
        model = self._to_model(entity)
        try:
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
        except (IntegrityError, DataError) as e:
            logger.warning(
                f"Constraint violation creating {self.entity_class.__name__}: {e.orig}"
            )
            raise classify_constraint_error(e) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error creating {self.entity_class.__name__}: {e}")
            raise DatabaseError(
                f"Failed to create {self.entity_class.__name__}", {"error": str(e)}
            ) from e
        return self._to_entity(model)

    async def delete(self, entity_id: int) -> bool:
        """Delete an entity by ID; dependent rows go with it via ON DELETE CASCADE."""
        try:
            result = await self.session.execute(
                delete(self.model_class).where(self.model_class.id == entity_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting {self.entity_class.__name__}: {e}")
            raise DatabaseError(
                f"Failed to delete {self.entity_class.__name__}",
                {"id": entity_id, "error": str(e)},
            ) from e
        return (result.rowcount or 0) > 0

    def _to_entity(self, model: Any) -> T:
        """Convert database model to domain entity."""
        raise NotImplementedError("Subclass must implement _to_entity")

    def _to_model(self, entity: T) -> Any:
        """Convert domain entity to database model."""
        raise NotImplementedError("Subclass must implement _to_model")

"""Election repository implementation using SQLAlchemy."""

import logging

from typing import Any

from sqlalchemy import func, update
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.election import Election
from src.domain.repositories.election_repository import ElectionRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import BaseRepositoryImpl
from src.infrastructure.persistence.constraint_errors import classify_constraint_error
from src.infrastructure.persistence.json_columns import dump_json
from src.infrastructure.persistence.model_mappers import (
    election_to_entity,
    election_to_model,
)
from src.infrastructure.persistence.sqlalchemy_models import ElectionModel


logger = logging.getLogger(__name__)

JSON_COLUMNS = frozenset({"countries", "regional_fees", "brand_colors"})


class ElectionRepositoryImpl(BaseRepositoryImpl[Election], ElectionRepository):
    """Election repository implementation using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Args:
            session: AsyncSession for database operations
        """
        super().__init__(
            session=session,
            entity_class=Election,
            model_class=ElectionModel,
        )

    async def update_fields(self, election_id: int, values: dict[str, Any]) -> bool:
        """Update the given columns and bump ``updated_at`` / ``last_saved``.

        Args:
            election_id: Election ID
            values: Column name to new value, already allow-listed

        Returns:
            True if a row was updated, False if the election does not exist
        """
        columns = {
            key: dump_json(value) if key in JSON_COLUMNS else value
            for key, value in values.items()
        }
        stmt = (
            update(ElectionModel)
            .where(ElectionModel.id == election_id)
            .values(
                **columns,
                updated_at=func.current_timestamp(),
                last_saved=func.current_timestamp(),
            )
        )
        try:
            result = await self.session.execute(stmt)
        except (IntegrityError, DataError) as e:
            logger.warning(f"Constraint violation updating election: {e.orig}")
            raise classify_constraint_error(e) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error updating election: {e}")
            raise DatabaseError(
                "Failed to update election",
                {"election_id": election_id, "error": str(e)},
            ) from e
        return (result.rowcount or 0) > 0

    async def set_media_urls(
        self,
        election_id: int,
        topic_image_url: str | None = None,
        logo_branding_url: str | None = None,
    ) -> None:
        """Set topic/logo URLs; a None argument keeps the stored value.

        Args:
            election_id: Election ID
            topic_image_url: New topic image URL
            logo_branding_url: New logo URL
        """
        values: dict[str, Any] = {}
        if topic_image_url is not None:
            values["topic_image_url"] = topic_image_url
        if logo_branding_url is not None:
            values["logo_branding_url"] = logo_branding_url
        if not values:
            return

        try:
            await self.session.execute(
                update(ElectionModel)
                .where(ElectionModel.id == election_id)
                .values(**values)
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error setting election media URLs: {e}")
            raise DatabaseError(
                "Failed to set election media URLs",
                {"election_id": election_id, "error": str(e)},
            ) from e

    def _to_entity(self, model: ElectionModel) -> Election:
        return election_to_entity(model)

    def _to_model(self, entity: Election) -> ElectionModel:
        return election_to_model(entity)

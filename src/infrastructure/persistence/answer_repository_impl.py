"""Answer repository implementation using SQLAlchemy."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.answer import Answer
from src.domain.repositories.answer_repository import AnswerRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import BaseRepositoryImpl
from src.infrastructure.persistence.model_mappers import (
    answer_to_entity,
    answer_to_model,
)
from src.infrastructure.persistence.sqlalchemy_models import AnswerModel


logger = logging.getLogger(__name__)


class AnswerRepositoryImpl(BaseRepositoryImpl[Answer], AnswerRepository):
    """Answer repository implementation using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            entity_class=Answer,
            model_class=AnswerModel,
        )

    async def set_image_url(self, answer_id: int, url: str) -> None:
        """Store the image URL of an answer."""
        try:
            await self.session.execute(
                update(AnswerModel)
                .where(AnswerModel.id == answer_id)
                .values(answer_image_url=url)
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error setting answer image URL: {e}")
            raise DatabaseError(
                "Failed to set answer image URL",
                {"answer_id": answer_id, "error": str(e)},
            ) from e

    def _to_entity(self, model: AnswerModel) -> Answer:
        return answer_to_entity(model)

    def _to_model(self, entity: Answer) -> AnswerModel:
        return answer_to_model(entity)

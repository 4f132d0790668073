"""Question repository implementation using SQLAlchemy."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.question import Question
from src.domain.repositories.question_repository import QuestionRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import BaseRepositoryImpl
from src.infrastructure.persistence.model_mappers import (
    question_to_entity,
    question_to_model,
)
from src.infrastructure.persistence.sqlalchemy_models import QuestionModel


logger = logging.getLogger(__name__)


class QuestionRepositoryImpl(BaseRepositoryImpl[Question], QuestionRepository):
    """Question repository implementation using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            entity_class=Question,
            model_class=QuestionModel,
        )

    async def set_image_url(self, question_id: int, url: str) -> None:
        """Store the image URL of a question."""
        try:
            await self.session.execute(
                update(QuestionModel)
                .where(QuestionModel.id == question_id)
                .values(question_image_url=url)
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error setting question image URL: {e}")
            raise DatabaseError(
                "Failed to set question image URL",
                {"question_id": question_id, "error": str(e)},
            ) from e

    def _to_entity(self, model: QuestionModel) -> Question:
        return question_to_entity(model)

    def _to_model(self, entity: Question) -> QuestionModel:
        return question_to_model(entity)

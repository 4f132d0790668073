"""Media attachment repository implementation using SQLAlchemy."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.media_attachment import MediaAttachment
from src.domain.repositories.media_attachment_repository import (
    MediaAttachmentRepository,
)
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import BaseRepositoryImpl
from src.infrastructure.persistence.model_mappers import (
    attachment_to_entity,
    attachment_to_model,
)
from src.infrastructure.persistence.sqlalchemy_models import MediaAttachmentModel


logger = logging.getLogger(__name__)


class MediaAttachmentRepositoryImpl(
    BaseRepositoryImpl[MediaAttachment], MediaAttachmentRepository
):
    """Media attachment repository implementation using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            entity_class=MediaAttachment,
            model_class=MediaAttachmentModel,
        )

    async def get_by_election(self, election_id: int) -> list[MediaAttachment]:
        """Get every attachment record of an election, oldest first.

        Args:
            election_id: Election ID

        Returns:
            List of attachment entities
        """
        query = (
            select(MediaAttachmentModel)
            .where(MediaAttachmentModel.election_id == election_id)
            .order_by(MediaAttachmentModel.id)
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Database error getting election attachments: {e}")
            raise DatabaseError(
                "Failed to get election attachments",
                {"election_id": election_id, "error": str(e)},
            ) from e
        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: MediaAttachmentModel) -> MediaAttachment:
        return attachment_to_entity(model)

    def _to_model(self, entity: MediaAttachment) -> MediaAttachmentModel:
        return attachment_to_model(entity)

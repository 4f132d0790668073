"""Answer repository interface."""

from abc import abstractmethod

from src.domain.entities.answer import Answer
from src.domain.repositories.base import BaseRepository


class AnswerRepository(BaseRepository[Answer]):
    """Repository interface for question answers."""

    @abstractmethod
    async def set_image_url(self, answer_id: int, url: str) -> None:
        """Store the image URL of an answer."""
        pass

"""Question repository interface."""

from abc import abstractmethod

from src.domain.entities.question import Question
from src.domain.repositories.base import BaseRepository


class QuestionRepository(BaseRepository[Question]):
    """Repository interface for election questions."""

    @abstractmethod
    async def set_image_url(self, question_id: int, url: str) -> None:
        """Store the image URL of a question."""
        pass

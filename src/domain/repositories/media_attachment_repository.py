"""Media attachment repository interface."""

from abc import abstractmethod

from src.domain.entities.media_attachment import MediaAttachment
from src.domain.repositories.base import BaseRepository


class MediaAttachmentRepository(BaseRepository[MediaAttachment]):
    """Repository interface for media attachment audit rows."""

    @abstractmethod
    async def get_by_election(self, election_id: int) -> list[MediaAttachment]:
        """Get every attachment record of an election, oldest first."""
        pass

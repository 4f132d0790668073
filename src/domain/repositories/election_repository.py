"""Election repository interface."""

from abc import abstractmethod
from typing import Any

from src.domain.entities.election import Election
from src.domain.repositories.base import BaseRepository


class ElectionRepository(BaseRepository[Election]):
    """Repository interface for the election root row."""

    @abstractmethod
    async def update_fields(self, election_id: int, values: dict[str, Any]) -> bool:
        """Update the given columns of an election.

        Args:
            election_id: Election ID
            values: Column name to new value, already allow-listed

        Returns:
            True if a row was updated, False if the election does not exist
        """
        pass

    @abstractmethod
    async def set_media_urls(
        self,
        election_id: int,
        topic_image_url: str | None = None,
        logo_branding_url: str | None = None,
    ) -> None:
        """Set topic/logo URLs; a None argument keeps the stored value."""
        pass

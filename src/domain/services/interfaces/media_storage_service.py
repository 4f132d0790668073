"""Media storage service interface."""

from abc import ABC, abstractmethod

from src.domain.value_objects.stored_asset import StoredAsset


class IMediaStorageService(ABC):
    """External capability that stores binary assets.

    Every call may fail independently; callers treat failures as
    recoverable.
    """

    @abstractmethod
    async def upload(
        self, content: bytes, destination: str, filename: str | None = None
    ) -> StoredAsset:
        """Store content under a logical destination.

        Args:
            content: Raw bytes of the asset
            destination: Logical destination hint, e.g. ``elections/12/topic_1700``
            filename: Original filename, informational only

        Returns:
            StoredAsset with the opaque storage id and durable URL
        """
        pass

    @abstractmethod
    async def delete(self, storage_id: str) -> bool:
        """Delete a stored asset. Returns whether the store acknowledged it."""
        pass

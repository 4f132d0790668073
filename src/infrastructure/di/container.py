"""Application wiring.

Builds the database manager, the media storage client and the use cases
from the settings. Commands fetch the process-wide container with
``get_container()`` and fall back to ``init_container()``.
"""

from src.application.services.optional_feature_attacher import (
    OptionalFeatureAttacher,
)
from src.application.usecases.create_election_usecase import CreateElectionUseCase
from src.application.usecases.manage_elections_usecase import ManageElectionsUseCase
from src.common.logging import get_logger
from src.domain.services.interfaces.media_storage_service import IMediaStorageService
from src.infrastructure.config.async_database import AsyncDatabase
from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.external.media_storage import CloudinaryMediaStorageService
from src.infrastructure.persistence.unit_of_work_impl import UnitOfWorkImpl


logger = get_logger(__name__)


class Container:
    """Holds the long-lived collaborators and builds use cases on demand."""

    def __init__(
        self,
        settings: Settings | None = None,
        database: AsyncDatabase | None = None,
        media_storage: IMediaStorageService | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.database = database or AsyncDatabase(settings=self.settings)
        self._media_storage = media_storage
        self._media_storage_resolved = media_storage is not None

    def media_storage(self) -> IMediaStorageService | None:
        """Cloudinary client when credentials are configured, else None."""
        if not self._media_storage_resolved:
            service = CloudinaryMediaStorageService(self.settings)
            if service.is_configured:
                self._media_storage = service
            else:
                logger.info("Cloudinary is not configured; media uploads disabled")
            self._media_storage_resolved = True
        return self._media_storage

    def unit_of_work(self) -> UnitOfWorkImpl:
        """A fresh unit of work bound to the running event loop's engine."""
        return UnitOfWorkImpl(self.database.async_session_maker)

    def create_election_usecase(self) -> CreateElectionUseCase:
        return CreateElectionUseCase(
            uow_factory=self.unit_of_work,
            attacher=OptionalFeatureAttacher(media_storage=self.media_storage()),
            expose_error_detail=not self.settings.is_production,
        )

    def manage_elections_usecase(self) -> ManageElectionsUseCase:
        return ManageElectionsUseCase(
            uow_factory=self.unit_of_work,
            media_storage=self.media_storage(),
        )


_container: Container | None = None


def init_container(
    settings: Settings | None = None,
    database: AsyncDatabase | None = None,
    media_storage: IMediaStorageService | None = None,
) -> Container:
    """Create and register the process-wide container."""
    global _container
    _container = Container(
        settings=settings, database=database, media_storage=media_storage
    )
    return _container


def get_container() -> Container:
    """Registered container.

    Raises:
        RuntimeError: If ``init_container`` has not been called
    """
    if _container is None:
        raise RuntimeError("Container is not initialized")
    return _container


def reset_container() -> None:
    global _container
    _container = None

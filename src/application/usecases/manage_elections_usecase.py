"""Reading, updating and deleting election aggregates."""

from collections.abc import Callable

from src.application.dtos.election_dto import (
    DeleteElectionInputDto,
    DeleteElectionOutputDto,
    ElectionDetailOutputItem,
    GetElectionInputDto,
    GetElectionOutputDto,
    UpdateElectionInputDto,
    UpdateElectionOutputDto,
)
from src.application.services.election_update_builder import ElectionUpdateBuilder
from src.common.logging import get_logger
from src.domain.exceptions import DomainException, ElectionValidationException
from src.domain.services.interfaces.media_storage_service import IMediaStorageService
from src.domain.services.interfaces.unit_of_work import IUnitOfWork
from src.infrastructure.exceptions import InfrastructureError


logger = get_logger(__name__)


class ManageElectionsUseCase:
    """Use case for managing existing elections."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        media_storage: IMediaStorageService | None = None,
        update_builder: ElectionUpdateBuilder | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            uow_factory: Returns a fresh unit of work per call
            media_storage: Used to delete stored assets of deleted elections
            update_builder: Allow-list builder for updates
        """
        self.uow_factory = uow_factory
        self.media_storage = media_storage
        self.update_builder = update_builder or ElectionUpdateBuilder()

    async def get_election(
        self, input_dto: GetElectionInputDto
    ) -> GetElectionOutputDto:
        """Read one aggregate; an unknown id gives ``found=False``."""
        try:
            async with self.uow_factory() as uow:
                election = await uow.aggregates.get_aggregate(input_dto.id)
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Failed to get election {input_dto.id}: {e}")
            return GetElectionOutputDto(
                found=False, success=False, error_message=str(e)
            )

        if election is None:
            return GetElectionOutputDto(found=False)
        return GetElectionOutputDto(
            found=True, election=ElectionDetailOutputItem.from_entity(election)
        )

    async def update_election(
        self, input_dto: UpdateElectionInputDto
    ) -> UpdateElectionOutputDto:
        """Apply allow-listed changes and return the re-read aggregate."""
        try:
            values = self.update_builder.build(input_dto.changes)
        except ElectionValidationException as e:
            return UpdateElectionOutputDto(
                success=False, error_message="Validation failed", errors=e.errors
            )

        not_found = UpdateElectionOutputDto(
            success=False, error_message="Election not found"
        )
        try:
            async with self.uow_factory() as uow:
                current = await uow.elections.get_by_id(input_dto.id)
                if current is None:
                    await uow.rollback()
                    return not_found
                self.update_builder.check_merged(current, values)

                updated = await uow.elections.update_fields(input_dto.id, values)
                if not updated:
                    await uow.rollback()
                    return not_found
                await uow.commit()
                election = await uow.aggregates.get_aggregate(input_dto.id)
        except ElectionValidationException as e:
            return UpdateElectionOutputDto(
                success=False, error_message="Validation failed", errors=e.errors
            )
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Failed to update election {input_dto.id}: {e}")
            return UpdateElectionOutputDto(success=False, error_message=str(e))

        logger.info(
            "Election updated", election_id=input_dto.id, fields=sorted(values)
        )
        return UpdateElectionOutputDto(
            success=True,
            election=ElectionDetailOutputItem.from_entity(election)
            if election
            else None,
        )

    async def delete_election(
        self, input_dto: DeleteElectionInputDto
    ) -> DeleteElectionOutputDto:
        """Delete an election with everything it owns.

        Rows go first; stored assets are deleted after the commit and a
        failure there is only logged.
        """
        try:
            async with self.uow_factory() as uow:
                attachments = await uow.media_attachments.get_by_election(input_dto.id)
                deleted = await uow.elections.delete(input_dto.id)
                if not deleted:
                    await uow.rollback()
                    return DeleteElectionOutputDto(
                        success=False, error_message="Election not found"
                    )
                await uow.commit()
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Failed to delete election {input_dto.id}: {e}")
            return DeleteElectionOutputDto(success=False, error_message=str(e))

        removed = 0
        if self.media_storage is not None:
            for attachment in attachments:
                try:
                    if await self.media_storage.delete(attachment.storage_id):
                        removed += 1
                except Exception as e:
                    logger.warning(
                        f"Could not delete stored asset: {e}",
                        storage_id=attachment.storage_id,
                        election_id=input_dto.id,
                    )

        logger.info(
            "Election deleted", election_id=input_dto.id, deleted_assets=removed
        )
        return DeleteElectionOutputDto(success=True, deleted_assets=removed)

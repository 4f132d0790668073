"""Composite election creation."""

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from src.application.dtos.election_dto import (
    CreateElectionInputDto,
    CreateElectionOutputDto,
    ElectionDetailOutputItem,
    MediaInput,
    OptionalFeatureFailure,
)
from src.application.services.election_aggregate_writer import (
    ElectionAggregateWriter,
    WrittenAggregate,
)
from src.application.services.election_payload_parser import ElectionPayloadParser
from src.application.services.optional_feature_attacher import (
    OptionalFeatureAttacher,
    PendingAttachment,
)
from src.common.logging import get_logger
from src.domain.exceptions import (
    ConstraintViolationException,
    DomainException,
    ElectionValidationException,
)
from src.domain.services.interfaces.unit_of_work import IUnitOfWork
from src.infrastructure.exceptions import InfrastructureError


logger = get_logger(__name__)

UnitOfWorkFactory = Callable[[], IUnitOfWork]


class CreationStage(str, Enum):
    """Stages of one creation run, in order."""

    VALIDATING = "validating"
    WRITING = "writing"
    ATTACHING_OPTIONAL = "attaching_optional"
    COMMITTING = "committing"
    READING = "reading"
    DONE = "done"


class CreateElectionUseCase:
    """Creates an election aggregate and returns it re-read from storage.

    Stages run as VALIDATING -> WRITING -> ATTACHING_OPTIONAL -> COMMITTING
    -> READING -> DONE. Only validation and the mandatory write (including
    its commit) can fail the run; optional features are reported in
    ``optional_failures`` instead.

    The election, questions, answers and reward row share one transaction,
    the reward inside a savepoint. Media is uploaded after that commit so no
    transaction stays open during network calls, and recorded in a second,
    short unit of work.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        attacher: OptionalFeatureAttacher | None = None,
        writer: ElectionAggregateWriter | None = None,
        parser: ElectionPayloadParser | None = None,
        expose_error_detail: bool = False,
    ) -> None:
        """Initialize the use case.

        Args:
            uow_factory: Returns a fresh unit of work per call
            attacher: Optional-feature attacher; without one media is skipped
            writer: Aggregate writer
            parser: Payload parser used for raw payloads
            expose_error_detail: Include driver messages in failure envelopes
        """
        self.uow_factory = uow_factory
        self.attacher = attacher or OptionalFeatureAttacher()
        self.writer = writer or ElectionAggregateWriter()
        self.parser = parser or ElectionPayloadParser()
        self.expose_error_detail = expose_error_detail
        self.stage = CreationStage.VALIDATING

    async def execute(
        self,
        payload: CreateElectionInputDto | Mapping[str, Any] | str,
        files: Mapping[str, Any] | None = None,
    ) -> CreateElectionOutputDto:
        """Validate, write, attach, commit and re-read one election.

        Args:
            payload: Raw payload (mapping or JSON text), or an already
                validated input DTO
            files: Media keyed by slot, used with raw payloads

        Returns:
            CreateElectionOutputDto with the nested election on success
        """
        self.stage = CreationStage.VALIDATING
        try:
            if isinstance(payload, CreateElectionInputDto):
                input_dto = payload
            else:
                input_dto = self.parser.parse(payload, files)
        except ElectionValidationException as e:
            return CreateElectionOutputDto(
                success=False,
                error_message="Validation failed",
                errors=e.errors,
                failed_stage=CreationStage.VALIDATING.value,
            )

        optional_failures: list[OptionalFeatureFailure] = []
        try:
            async with self.uow_factory() as uow:
                self.stage = CreationStage.WRITING
                written = await self.writer.write(uow, input_dto)

                self.stage = CreationStage.ATTACHING_OPTIONAL
                reward_failure = await self.attacher.attach_reward(
                    uow, written.election_id, input_dto.reward
                )
                if reward_failure:
                    optional_failures.append(reward_failure)

                self.stage = CreationStage.COMMITTING
                await uow.commit()
        except ConstraintViolationException as e:
            logger.warning(
                f"Election creation rolled back at {self.stage.value}: {e}",
                category=e.category,
            )
            return self._failure("Failed to create election", e, e.category)
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Election creation rolled back at {self.stage.value}: {e}")
            return self._failure("Failed to create election", e)

        self.stage = CreationStage.ATTACHING_OPTIONAL
        if not input_dto.media.is_empty:
            optional_failures.extend(await self._attach_media(written, input_dto.media))

        self.stage = CreationStage.READING
        election = await self._read(written.election_id)

        self.stage = CreationStage.DONE
        logger.info(
            "Election created",
            election_id=written.election_id,
            optional_failures=len(optional_failures),
        )
        return CreateElectionOutputDto(
            success=True,
            message="Election created successfully",
            election=election,
            election_id=written.election_id,
            optional_failures=optional_failures,
        )

    async def _attach_media(
        self, written: WrittenAggregate, media: MediaInput
    ) -> list[OptionalFeatureFailure]:
        pending, failures = await self.attacher.upload_media(written, media)
        if not pending:
            return failures

        recorded: list[PendingAttachment] = []
        try:
            async with self.uow_factory() as uow:
                recorded, record_failures = await self.attacher.record_media(
                    uow, written.election_id, pending
                )
                failures.extend(record_failures)
                await uow.commit()
        except (DomainException, InfrastructureError) as e:
            logger.warning(
                f"Recording media failed, discarding uploads: {e}",
                election_id=written.election_id,
            )
            await self.attacher.discard_assets(recorded)
            failures.append(
                OptionalFeatureFailure(
                    feature="media", message=str(e), owner_id=written.election_id
                )
            )
        return failures

    async def _read(self, election_id: int) -> ElectionDetailOutputItem | None:
        """Re-read the committed aggregate.

        The creation is already durable here, so a read failure is logged
        and reported as a missing body rather than a failed creation.
        """
        try:
            async with self.uow_factory() as uow:
                election = await uow.aggregates.get_aggregate(election_id)
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Re-reading election {election_id} failed: {e}")
            return None
        if election is None:
            logger.warning(f"Election {election_id} vanished before re-read")
            return None
        return ElectionDetailOutputItem.from_entity(election)

    def _failure(
        self, message: str, error: Exception, constraint: str | None = None
    ) -> CreateElectionOutputDto:
        return CreateElectionOutputDto(
            success=False,
            error_message=message,
            error_detail=str(error) if self.expose_error_detail else None,
            constraint=constraint,
            failed_stage=CreationStage.WRITING.value,
        )

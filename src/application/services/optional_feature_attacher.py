"""Best-effort attachment of rewards and media to a written aggregate."""

import asyncio
import time

from collections.abc import Callable
from dataclasses import dataclass

from src.application.dtos.election_dto import (
    MediaInput,
    OptionalFeatureFailure,
    RewardInput,
)
from src.application.services.election_aggregate_writer import WrittenAggregate
from src.common.logging import get_logger
from src.domain.entities.media_attachment import MediaAttachment, MediaSlot
from src.domain.entities.reward_configuration import RewardConfiguration
from src.domain.services.interfaces.media_storage_service import IMediaStorageService
from src.domain.services.interfaces.unit_of_work import IUnitOfWork
from src.domain.services.media_correlation_service import MediaCorrelationService
from src.domain.value_objects.media_upload import MediaUpload
from src.domain.value_objects.stored_asset import StoredAsset


logger = get_logger(__name__)


@dataclass
class MediaJob:
    """One upload to perform."""

    slot: MediaSlot
    upload: MediaUpload
    destination: str
    reference_id: int | None = None


@dataclass
class PendingAttachment:
    """An uploaded asset whose URL and audit row are not yet recorded."""

    slot: MediaSlot
    asset: StoredAsset
    upload: MediaUpload
    reference_id: int | None = None


class OptionalFeatureAttacher:
    """Attaches the optional parts of an election.

    Every sub-step is isolated: a failure is logged, returned as an
    ``OptionalFeatureFailure`` and never propagates to the caller, so the
    mandatory aggregate is unaffected.
    """

    def __init__(
        self,
        media_storage: IMediaStorageService | None = None,
        correlation_service: MediaCorrelationService | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the attacher.

        Args:
            media_storage: Storage for uploaded images; None disables media
            correlation_service: Matches question/answer files to their owners
            clock_ms: Millisecond timestamp source used in destinations
        """
        self.media_storage = media_storage
        self.correlation_service = correlation_service or MediaCorrelationService()
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    async def attach_reward(
        self, uow: IUnitOfWork, election_id: int, reward: RewardInput | None
    ) -> OptionalFeatureFailure | None:
        """Insert the reward row inside a savepoint of the open transaction.

        Returns:
            The failure, or None when there was nothing to do or it succeeded
        """
        if reward is None:
            return None

        configuration = RewardConfiguration.normalized(
            election_id=election_id,
            reward_type=reward.reward_type,
            reward_amount=reward.reward_amount,
            non_monetary_reward=reward.non_monetary_reward,
            winner_count=reward.winner_count,
        )
        try:
            async with uow.savepoint():
                await uow.reward_configurations.create(configuration)
        except Exception as e:
            logger.warning(
                f"Reward configuration failed, election kept without it: {e}",
                election_id=election_id,
            )
            return OptionalFeatureFailure(
                feature="reward", message=str(e), owner_id=election_id
            )
        return None

    def plan_media(
        self, written: WrittenAggregate, media: MediaInput
    ) -> list[MediaJob]:
        """Work out every upload and its destination.

        Question and answer files are matched to their owners by correlation
        id; files that match no owner are skipped.
        """
        election_id = written.election_id
        stamp = self._clock_ms()
        base = f"elections/{election_id}"
        jobs: list[MediaJob] = []

        if media.topic_image:
            jobs.append(
                MediaJob(MediaSlot.TOPIC, media.topic_image, f"{base}/topic_{stamp}")
            )
        if media.logo_branding:
            jobs.append(
                MediaJob(MediaSlot.LOGO, media.logo_branding, f"{base}/logo_{stamp}")
            )

        matched_questions = self.correlation_service.match(
            media.question_images, written.question_ids.keys()
        )
        for correlation_id, upload in matched_questions.items():
            question_id = written.question_ids[correlation_id]
            jobs.append(
                MediaJob(
                    MediaSlot.QUESTION,
                    upload,
                    f"{base}/questions/q{question_id}_{stamp}",
                    reference_id=question_id,
                )
            )

        matched_answers = self.correlation_service.match(
            media.answer_images, written.answer_ids.keys()
        )
        for correlation_id, upload in matched_answers.items():
            answer_id = written.answer_ids[correlation_id]
            jobs.append(
                MediaJob(
                    MediaSlot.ANSWER,
                    upload,
                    f"{base}/answers/a{answer_id}_{stamp}",
                    reference_id=answer_id,
                )
            )

        skipped = (
            len(media.question_images)
            - len(matched_questions)
            + len(media.answer_images)
            - len(matched_answers)
        )
        if skipped:
            logger.info(
                f"{skipped} media file(s) matched no question or answer",
                election_id=election_id,
            )
        return jobs

    async def upload_media(
        self, written: WrittenAggregate, media: MediaInput
    ) -> tuple[list[PendingAttachment], list[OptionalFeatureFailure]]:
        """Upload every supplied asset concurrently.

        Runs outside any database transaction.

        Returns:
            Successful uploads and the failures, each independent of the others
        """
        jobs = self.plan_media(written, media)
        if not jobs:
            return [], []

        results = await asyncio.gather(
            *(self._upload_one(written.election_id, job) for job in jobs)
        )
        pending = [r for r in results if isinstance(r, PendingAttachment)]
        failures = [r for r in results if isinstance(r, OptionalFeatureFailure)]
        return pending, failures

    async def _upload_one(
        self, election_id: int, job: MediaJob
    ) -> PendingAttachment | OptionalFeatureFailure:
        owner_id = job.reference_id or election_id
        if self.media_storage is None:
            logger.warning(
                "Media storage is not configured, skipping upload",
                slot=job.slot.value,
                election_id=election_id,
            )
            return OptionalFeatureFailure(
                feature=f"media:{job.slot.value}",
                message="Media storage is not configured",
                owner_id=owner_id,
            )
        try:
            asset = await self.media_storage.upload(
                job.upload.content, job.destination, job.upload.filename
            )
        except Exception as e:
            logger.warning(
                f"Media upload failed: {e}",
                slot=job.slot.value,
                owner_id=owner_id,
                election_id=election_id,
            )
            return OptionalFeatureFailure(
                feature=f"media:{job.slot.value}", message=str(e), owner_id=owner_id
            )
        return PendingAttachment(
            slot=job.slot,
            asset=asset,
            upload=job.upload,
            reference_id=job.reference_id,
        )

    async def record_media(
        self,
        uow: IUnitOfWork,
        election_id: int,
        pending: list[PendingAttachment],
    ) -> tuple[list[PendingAttachment], list[OptionalFeatureFailure]]:
        """Store each uploaded URL and its audit row in its own savepoint.

        A failed write rolls back only that savepoint and deletes the
        orphaned asset from storage.

        Returns:
            The attachments recorded and the failures
        """
        recorded: list[PendingAttachment] = []
        failures: list[OptionalFeatureFailure] = []
        for attachment in pending:
            try:
                async with uow.savepoint():
                    await self._record_one(uow, election_id, attachment)
                recorded.append(attachment)
            except Exception as e:
                owner_id = attachment.reference_id or election_id
                logger.warning(
                    f"Recording media failed: {e}",
                    slot=attachment.slot.value,
                    owner_id=owner_id,
                    election_id=election_id,
                )
                failures.append(
                    OptionalFeatureFailure(
                        feature=f"media:{attachment.slot.value}",
                        message=str(e),
                        owner_id=owner_id,
                    )
                )
                await self.discard_assets([attachment])
        return recorded, failures

    @staticmethod
    async def _record_one(
        uow: IUnitOfWork, election_id: int, attachment: PendingAttachment
    ) -> None:
        url = attachment.asset.url
        if attachment.slot is MediaSlot.TOPIC:
            await uow.elections.set_media_urls(election_id, topic_image_url=url)
        elif attachment.slot is MediaSlot.LOGO:
            await uow.elections.set_media_urls(election_id, logo_branding_url=url)
        elif attachment.slot is MediaSlot.QUESTION and attachment.reference_id:
            await uow.questions.set_image_url(attachment.reference_id, url)
        elif attachment.slot is MediaSlot.ANSWER and attachment.reference_id:
            await uow.answers.set_image_url(attachment.reference_id, url)

        await uow.media_attachments.create(
            MediaAttachment(
                election_id=election_id,
                image_type=attachment.slot,
                storage_id=attachment.asset.storage_id,
                url=url,
                original_filename=attachment.upload.filename,
                reference_id=attachment.reference_id,
            )
        )

    async def discard_assets(self, pending: list[PendingAttachment]) -> None:
        """Delete uploaded assets that never got recorded, best-effort."""
        if self.media_storage is None:
            return
        for attachment in pending:
            try:
                await self.media_storage.delete(attachment.asset.storage_id)
            except Exception as e:
                logger.warning(
                    f"Could not delete orphaned asset: {e}",
                    storage_id=attachment.asset.storage_id,
                )

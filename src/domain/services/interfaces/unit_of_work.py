"""Unit of work over the election aggregate tables.

One instance owns one database session; every repository it hands out
writes through that session, so an aggregate lands in a single transaction.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Self

from src.domain.repositories.answer_repository import AnswerRepository
from src.domain.repositories.election_aggregate_repository import (
    ElectionAggregateRepository,
)
from src.domain.repositories.election_repository import ElectionRepository
from src.domain.repositories.media_attachment_repository import (
    MediaAttachmentRepository,
)
from src.domain.repositories.question_repository import QuestionRepository
from src.domain.repositories.reward_configuration_repository import (
    RewardConfigurationRepository,
)


class IUnitOfWork(ABC):
    """Transaction boundary shared by the election repositories.

    Usage:
        async with uow_factory() as uow:
            await uow.elections.create(...)
            await uow.commit()

    Leaving the block with an exception rolls back; leaving it cleanly
    without an explicit commit commits.
    """

    @property
    @abstractmethod
    def elections(self) -> ElectionRepository:
        """Get the election repository for this unit of work."""
        pass

    @property
    @abstractmethod
    def questions(self) -> QuestionRepository:
        """Get the question repository for this unit of work."""
        pass

    @property
    @abstractmethod
    def answers(self) -> AnswerRepository:
        """Get the answer repository for this unit of work."""
        pass

    @property
    @abstractmethod
    def reward_configurations(self) -> RewardConfigurationRepository:
        """Get the reward configuration repository for this unit of work."""
        pass

    @property
    @abstractmethod
    def media_attachments(self) -> MediaAttachmentRepository:
        """Get the media attachment repository for this unit of work."""
        pass

    @property
    @abstractmethod
    def aggregates(self) -> ElectionAggregateRepository:
        """Get the aggregate reader for this unit of work."""
        pass

    @abstractmethod
    async def __aenter__(self) -> Self:
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the current transaction."""
        pass

    @abstractmethod
    async def flush(self) -> None:
        """Send pending writes so generated ids become visible, without committing."""
        pass

    @abstractmethod
    def savepoint(self) -> AbstractAsyncContextManager[None]:
        """Open a nested transaction.

        An exception inside the block rolls back only the work done in the
        block and is re-raised; the outer transaction stays usable.
        """
        pass

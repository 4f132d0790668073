"""MagicMock unit of work with async repositories and a working savepoint."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

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
from src.domain.services.interfaces.unit_of_work import IUnitOfWork


def make_mock_uow() -> MagicMock:
    uow = MagicMock(spec=IUnitOfWork)
    uow.elections = AsyncMock(spec=ElectionRepository)
    uow.questions = AsyncMock(spec=QuestionRepository)
    uow.answers = AsyncMock(spec=AnswerRepository)
    uow.reward_configurations = AsyncMock(spec=RewardConfigurationRepository)
    uow.media_attachments = AsyncMock(spec=MediaAttachmentRepository)
    uow.aggregates = AsyncMock(spec=ElectionAggregateRepository)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.flush = AsyncMock()

    @asynccontextmanager
    async def savepoint():
        yield

    uow.savepoint = MagicMock(side_effect=savepoint)
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)
    return uow


def assign_ids(repository: AsyncMock, start: int = 1) -> None:
    """Make ``repository.create`` return its argument with a fresh id."""
    counter = iter(range(start, start + 10_000))

    async def create(entity):
        entity.id = next(counter)
        return entity

    repository.create.side_effect = create

"""Unit of Work implementation backed by one SQLAlchemy AsyncSession."""

import logging

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Self, TypeVar

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.services.interfaces.unit_of_work import IUnitOfWork
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.answer_repository_impl import AnswerRepositoryImpl
from src.infrastructure.persistence.constraint_errors import classify_constraint_error
from src.infrastructure.persistence.election_aggregate_repository_impl import (
    ElectionAggregateRepositoryImpl,
)
from src.infrastructure.persistence.election_repository_impl import (
    ElectionRepositoryImpl,
)
from src.infrastructure.persistence.media_attachment_repository_impl import (
    MediaAttachmentRepositoryImpl,
)
from src.infrastructure.persistence.question_repository_impl import (
    QuestionRepositoryImpl,
)
from src.infrastructure.persistence.reward_configuration_repository_impl import (
    RewardConfigurationRepositoryImpl,
)


logger = logging.getLogger(__name__)
R = TypeVar("R")


class UnitOfWorkImpl(IUnitOfWork):
    """Async context manager owning one session and its transaction.

    Usage:
        async with UnitOfWorkImpl(session_maker) as uow:
            election = await uow.elections.create(...)
            await uow.commit()

    Repositories are created lazily on first access and all share the
    session. Leaving the block with an exception rolls back; leaving it
    cleanly without a commit commits. The session is always closed.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._session: AsyncSession | None = None
        self._completed = False
        self._repositories: dict[str, object] = {}

    async def __aenter__(self) -> Self:
        self._session = self._session_maker()
        self._completed = False
        self._repositories = {}
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is not None:
                if not self._completed:
                    logger.warning(
                        f"Rolling back unit of work after {exc_type.__name__}: "
                        f"{exc_val}"
                    )
                    await self.rollback()
            elif not self._completed:
                await self.commit()
        finally:
            await self._session.close()
            self._session = None
            self._repositories = {}

    @property
    def session(self) -> AsyncSession:
        """Current session; only available inside ``async with``."""
        if self._session is None:
            raise RuntimeError("UnitOfWork used outside of its 'async with' block")
        return self._session

    def _repository(self, name: str, factory: type[R]) -> R:
        if name not in self._repositories:
            self._repositories[name] = factory(self.session)
        return self._repositories[name]  # type: ignore[return-value]

    @property
    def elections(self) -> ElectionRepositoryImpl:
        return self._repository("elections", ElectionRepositoryImpl)

    @property
    def questions(self) -> QuestionRepositoryImpl:
        return self._repository("questions", QuestionRepositoryImpl)

    @property
    def answers(self) -> AnswerRepositoryImpl:
        return self._repository("answers", AnswerRepositoryImpl)

    @property
    def reward_configurations(self) -> RewardConfigurationRepositoryImpl:
        return self._repository(
            "reward_configurations", RewardConfigurationRepositoryImpl
        )

    @property
    def media_attachments(self) -> MediaAttachmentRepositoryImpl:
        return self._repository("media_attachments", MediaAttachmentRepositoryImpl)

    @property
    def aggregates(self) -> ElectionAggregateRepositoryImpl:
        return self._repository("aggregates", ElectionAggregateRepositoryImpl)

    async def commit(self) -> None:
        """Commit the current transaction.

        Raises:
            ConstraintViolationException: If a deferred constraint fails
            DatabaseError: On any other database failure
        """
        try:
            await self.session.commit()
        except (IntegrityError, DataError) as e:
            raise classify_constraint_error(e) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error committing unit of work: {e}")
            raise DatabaseError(
                "Failed to commit transaction", {"error": str(e)}
            ) from e
        self._completed = True

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        await self.session.rollback()
        self._completed = True

    async def flush(self) -> None:
        """Flush pending changes so generated IDs become available."""
        try:
            await self.session.flush()
        except (IntegrityError, DataError) as e:
            raise classify_constraint_error(e) from e

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run the block in a SAVEPOINT.

        An exception rolls back to the savepoint and is re-raised; the
        enclosing transaction stays usable.
        """
        async with self.session.begin_nested():
            yield

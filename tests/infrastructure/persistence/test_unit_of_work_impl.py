"""Tests for UnitOfWorkImpl against an in-memory SQLite database."""

from decimal import Decimal

import pytest

from sqlalchemy import func, select

from src.domain.entities.question import Question
from src.domain.entities.reward_configuration import RewardConfiguration, RewardType
from src.domain.exceptions import ConstraintViolationException
from src.infrastructure.persistence.sqlalchemy_models import (
    ElectionModel,
    RewardConfigurationModel,
)
from src.infrastructure.persistence.unit_of_work_impl import UnitOfWorkImpl
from tests.fixtures.election_factories import make_election


async def _count(session_maker, model) -> int:
    async with session_maker() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar()


@pytest.mark.integration
class TestUnitOfWorkImpl:
    """Transaction boundaries of UnitOfWorkImpl."""

    @pytest.mark.asyncio
    async def test_commit_persists(self, uow_factory, session_maker):
        async with uow_factory() as uow:
            election = await uow.elections.create(make_election())
            await uow.commit()

        assert election.id is not None
        assert await _count(session_maker, ElectionModel) == 1

    @pytest.mark.asyncio
    async def test_exception_rolls_back(self, uow_factory, session_maker):
        with pytest.raises(RuntimeError):
            async with uow_factory() as uow:
                await uow.elections.create(make_election())
                raise RuntimeError("boom")

        assert await _count(session_maker, ElectionModel) == 0

    @pytest.mark.asyncio
    async def test_clean_exit_commits(self, uow_factory, session_maker):
        async with uow_factory() as uow:
            await uow.elections.create(make_election())

        assert await _count(session_maker, ElectionModel) == 1

    @pytest.mark.asyncio
    async def test_explicit_rollback(self, uow_factory, session_maker):
        async with uow_factory() as uow:
            await uow.elections.create(make_election())
            await uow.rollback()

        assert await _count(session_maker, ElectionModel) == 0

    @pytest.mark.asyncio
    async def test_savepoint_failure_keeps_outer_work(
        self, uow_factory, session_maker
    ):
        async with uow_factory() as uow:
            election = await uow.elections.create(make_election())
            with pytest.raises(ConstraintViolationException) as exc_info:
                async with uow.savepoint():
                    await uow.reward_configurations.create(
                        RewardConfiguration(
                            election_id=election.id,
                            reward_type=RewardType.MONETARY,
                            reward_amount=Decimal("5"),
                            winner_count=0,
                        )
                    )
            await uow.commit()

        assert exc_info.value.category == "check"
        assert await _count(session_maker, ElectionModel) == 1
        assert await _count(session_maker, RewardConfigurationModel) == 0

    @pytest.mark.asyncio
    async def test_foreign_keys_are_enforced(self, uow_factory):
        with pytest.raises(ConstraintViolationException) as exc_info:
            async with uow_factory() as uow:
                await uow.questions.create(
                    Question(election_id=999, question_text="Q", question_order=1)
                )

        assert exc_info.value.category == "foreign_key"

    @pytest.mark.asyncio
    async def test_repositories_are_cached_per_block(self, uow_factory):
        async with uow_factory() as uow:
            assert uow.elections is uow.elections
            assert uow.aggregates is uow.aggregates

    def test_session_outside_block_raises(self, session_maker):
        uow = UnitOfWorkImpl(session_maker)

        with pytest.raises(RuntimeError):
            uow.session

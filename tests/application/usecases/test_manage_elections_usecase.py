"""Tests for ManageElectionsUseCase with a mocked unit of work."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.dtos.election_dto import (
    DeleteElectionInputDto,
    GetElectionInputDto,
    UpdateElectionInputDto,
)
from src.application.usecases.manage_elections_usecase import (
    ManageElectionsUseCase,
)
from src.domain.entities.election import Election
from src.domain.entities.media_attachment import MediaAttachment, MediaSlot
from src.domain.services.interfaces.media_storage_service import IMediaStorageService
from src.domain.value_objects.schedule_point import SchedulePoint
from src.infrastructure.exceptions import DatabaseError, MediaStorageError
from tests.fixtures.mock_unit_of_work import make_mock_uow


def _election() -> Election:
    return Election(
        id=4,
        title="Spring",
        description="Spring vote",
        start=SchedulePoint(date=date(2030, 3, 1), time="09:00"),
        end=SchedulePoint(date=date(2030, 3, 2), time="18:00"),
        creator_id=1,
    )


def _attachment(storage_id: str) -> MediaAttachment:
    return MediaAttachment(
        election_id=4,
        image_type=MediaSlot.TOPIC,
        storage_id=storage_id,
        url=f"https://x/{storage_id}",
    )


@pytest.fixture
def uow():
    return make_mock_uow()


@pytest.fixture
def storage() -> AsyncMock:
    storage = AsyncMock(spec=IMediaStorageService)
    storage.delete.return_value = True
    return storage


@pytest.fixture
def usecase(uow, storage) -> ManageElectionsUseCase:
    return ManageElectionsUseCase(uow_factory=lambda: uow, media_storage=storage)


class TestGetElection:
    """Test cases for get_election."""

    @pytest.mark.asyncio
    async def test_found(self, usecase, uow):
        uow.aggregates.get_aggregate.return_value = _election()

        result = await usecase.get_election(GetElectionInputDto(id=4))

        assert result.found is True
        assert result.election.to_dict()["title"] == "Spring"

    @pytest.mark.asyncio
    async def test_not_found(self, usecase, uow):
        uow.aggregates.get_aggregate.return_value = None

        result = await usecase.get_election(GetElectionInputDto(id=99))

        assert result.found is False
        assert result.success is True

    @pytest.mark.asyncio
    async def test_database_error(self, usecase, uow):
        uow.aggregates.get_aggregate.side_effect = DatabaseError("down")

        result = await usecase.get_election(GetElectionInputDto(id=4))

        assert result.success is False
        assert result.error_message == "down"


class TestUpdateElection:
    """Test cases for update_election."""

    @pytest.mark.asyncio
    async def test_update(self, usecase, uow):
        uow.elections.get_by_id.return_value = _election()
        uow.elections.update_fields.return_value = True
        uow.aggregates.get_aggregate.return_value = _election()

        result = await usecase.update_election(
            UpdateElectionInputDto(id=4, changes={"title": "Spring"})
        )

        assert result.success is True
        uow.elections.update_fields.assert_awaited_once_with(4, {"title": "Spring"})
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_validation_error(self, usecase, uow):
        result = await usecase.update_election(
            UpdateElectionInputDto(id=4, changes={"creatorId": 2})
        )

        assert result.success is False
        assert result.errors == ["creatorId: cannot be updated"]
        uow.elections.update_fields.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found(self, usecase, uow):
        uow.elections.get_by_id.return_value = None

        result = await usecase.update_election(
            UpdateElectionInputDto(id=4, changes={"title": "X"})
        )

        assert result.success is False
        assert result.error_message == "Election not found"
        uow.rollback.assert_awaited_once()
        uow.elections.update_fields.assert_not_awaited()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_row_vanishes_before_update(self, usecase, uow):
        uow.elections.get_by_id.return_value = _election()
        uow.elections.update_fields.return_value = False

        result = await usecase.update_election(
            UpdateElectionInputDto(id=4, changes={"title": "X"})
        )

        assert result.error_message == "Election not found"
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_merged_row_is_validated(self, usecase, uow):
        uow.elections.get_by_id.return_value = _election()

        result = await usecase.update_election(
            UpdateElectionInputDto(
                id=4, changes={"endDate": "2030-02-01", "pricingType": "general"}
            )
        )

        assert result.success is False
        assert result.error_message == "Validation failed"
        assert result.errors == [
            "End date must be after start date",
            "Participation fee must be greater than 0 for paid elections",
        ]
        uow.elections.update_fields.assert_not_awaited()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_timezone_is_rejected(self, usecase, uow):
        result = await usecase.update_election(
            UpdateElectionInputDto(id=4, changes={"timezone": "Mars/Base"})
        )

        assert result.errors == ["timezone: Unknown timezone: Mars/Base"]
        uow.elections.get_by_id.assert_not_awaited()


class TestDeleteElection:
    """Test cases for delete_election."""

    @pytest.mark.asyncio
    async def test_delete_removes_rows_then_assets(self, usecase, uow, storage):
        uow.media_attachments.get_by_election.return_value = [
            _attachment("s1"),
            _attachment("s2"),
        ]
        uow.elections.delete.return_value = True

        result = await usecase.delete_election(DeleteElectionInputDto(id=4))

        assert result.success is True
        assert result.deleted_assets == 2
        uow.commit.assert_awaited_once()
        assert [c.args[0] for c in storage.delete.await_args_list] == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_storage_failure_is_not_fatal(self, usecase, uow, storage):
        uow.media_attachments.get_by_election.return_value = [
            _attachment("s1"),
            _attachment("s2"),
        ]
        uow.elections.delete.return_value = True
        storage.delete.side_effect = [MediaStorageError("nope"), True]

        result = await usecase.delete_election(DeleteElectionInputDto(id=4))

        assert result.success is True
        assert result.deleted_assets == 1

    @pytest.mark.asyncio
    async def test_not_found(self, usecase, uow, storage):
        uow.media_attachments.get_by_election.return_value = []
        uow.elections.delete.return_value = False

        result = await usecase.delete_election(DeleteElectionInputDto(id=4))

        assert result.success is False
        assert result.error_message == "Election not found"
        storage.delete.assert_not_awaited()

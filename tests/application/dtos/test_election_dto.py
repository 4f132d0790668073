"""Tests for the election DTO read shapes and envelopes."""

from datetime import date, datetime
from decimal import Decimal

from src.application.dtos.election_dto import (
    CreateElectionOutputDto,
    ElectionDetailOutputItem,
    MediaInput,
    OptionalFeatureFailure,
    RewardOutputItem,
)
from src.domain.entities.answer import Answer
from src.domain.entities.election import Election, PricingType
from src.domain.entities.question import Question
from src.domain.entities.reward_configuration import RewardConfiguration, RewardType
from src.domain.value_objects.schedule_point import SchedulePoint
from tests.fixtures.election_factories import make_upload


def _aggregate() -> Election:
    question = Question(
        id=2,
        election_id=1,
        question_text="Chair?",
        question_order=1,
        question_external_id="q1",
        answers=[
            Answer(id=3, question_id=2, answer_text="Alice", answer_order=1),
            Answer(
                id=4,
                question_id=2,
                answer_text="Bob",
                answer_order=2,
                answer_external_id="a2",
                answer_image_url="https://x/a2.png",
            ),
        ],
    )
    return Election(
        id=1,
        title="Board",
        description="Board vote",
        start=SchedulePoint(date=date(2030, 1, 1), time="09:00"),
        end=SchedulePoint(date=date(2030, 1, 31), time="18:00"),
        creator_id=7,
        pricing_type=PricingType.GENERAL,
        is_paid=True,
        participation_fee=Decimal("4.50"),
        countries=["US"],
        questions=[question],
        reward=RewardConfiguration.normalized(
            RewardType.MONETARY, reward_amount=Decimal("100"), winner_count=2
        ),
        created_at=datetime(2029, 12, 1, 8, 0),
    )


class TestElectionDetailOutputItem:
    """Test cases for the nested read shape."""

    def test_to_dict(self):
        body = ElectionDetailOutputItem.from_entity(_aggregate()).to_dict()

        assert body["id"] == 1
        assert body["startDate"] == {"date": "2030-01-01", "time": "09:00"}
        assert body["endDate"] == {"date": "2030-01-31", "time": "18:00"}
        assert body["pricingType"] == "general"
        assert body["participationFee"] == 4.5
        assert body["countries"] == ["US"]
        assert body["createdAt"] == "2029-12-01T08:00:00"
        assert body["updatedAt"] is None
        assert body["questions"][0]["externalId"] == "q1"
        assert [a["text"] for a in body["questions"][0]["answers"]] == [
            "Alice",
            "Bob",
        ]
        assert body["questions"][0]["answers"][1]["imageUrl"] == "https://x/a2.png"
        assert body["lottery"] == {
            "isLotterized": True,
            "rewardType": "monetary",
            "rewardAmount": 100.0,
            "nonMonetaryReward": None,
            "winnerCount": 2,
            "lotteryActive": True,
        }

    def test_lottery_without_reward_row(self):
        election = _aggregate()
        election.reward = None

        body = ElectionDetailOutputItem.from_entity(election).to_dict()

        assert body["lottery"]["isLotterized"] is False
        assert body["lottery"]["winnerCount"] == 0

    def test_reward_output_from_none(self):
        assert RewardOutputItem.from_entity(None).is_lotterized is False


class TestCreateElectionOutputDto:
    """Test cases for the creation envelope."""

    def test_success_envelope(self):
        dto = CreateElectionOutputDto(
            success=True,
            message="Election created successfully",
            election_id=1,
            election=ElectionDetailOutputItem.from_entity(_aggregate()),
            optional_failures=[
                OptionalFeatureFailure("media:logo", "timeout", owner_id=1)
            ],
        )

        body = dto.to_dict()

        assert body["success"] is True
        assert body["electionId"] == 1
        assert body["election"]["id"] == 1
        assert body["optionalFailures"] == [
            {"feature": "media:logo", "message": "timeout", "ownerId": 1}
        ]

    def test_success_without_reread_keeps_the_id(self):
        dto = CreateElectionOutputDto(
            success=True,
            message="Election created successfully",
            election=None,
            election_id=12,
        )

        body = dto.to_dict()

        assert body["electionId"] == 12
        assert body["election"] is None

    def test_failure_envelope(self):
        dto = CreateElectionOutputDto(
            success=False,
            error_message="Failed to create election",
            error_detail="UNIQUE constraint failed",
            constraint="unique",
            failed_stage="writing",
        )

        assert dto.to_dict() == {
            "success": False,
            "message": "Failed to create election",
            "failedStage": "writing",
            "constraint": "unique",
            "error": "UNIQUE constraint failed",
        }

    def test_validation_envelope(self):
        dto = CreateElectionOutputDto(
            success=False,
            error_message="Validation failed",
            errors=["Election title is required"],
            failed_stage="validating",
        )

        assert dto.to_dict()["errors"] == ["Election title is required"]


class TestMediaInput:
    """Test cases for MediaInput."""

    def test_is_empty(self):
        assert MediaInput().is_empty is True
        assert MediaInput(answer_images=[make_upload()]).is_empty is False

"""Tests for ElectionPayloadParser."""

import json

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from src.application.services.election_payload_parser import (
    MB,
    ElectionPayloadParser,
    decode_json_field,
    sanitize_text,
    slugify_title,
)
from src.domain.entities.election import PermissionToVote, PricingType
from src.domain.entities.question import QuestionType
from src.domain.entities.reward_configuration import RewardType
from src.domain.exceptions import ElectionValidationException
from tests.fixtures.election_factories import make_payload, make_upload


@pytest.fixture
def parser() -> ElectionPayloadParser:
    return ElectionPayloadParser(clock=lambda: datetime(2029, 6, 1, tzinfo=UTC))


def _errors(parser: ElectionPayloadParser, payload, files=None) -> list[str]:
    with pytest.raises(ElectionValidationException) as exc_info:
        parser.parse(payload, files)
    return exc_info.value.errors


class TestHelpers:
    """Test cases for the module-level helpers."""

    def test_sanitize_text_strips_script_and_iframe(self):
        raw = "<script>alert(1)</script>Hello <iframe src='x'></iframe>world"

        assert sanitize_text(raw) == "Hello world"

    def test_sanitize_text_removes_javascript_scheme(self):
        assert sanitize_text("JavaScript:go()") == "go()"

    def test_sanitize_text_none(self):
        assert sanitize_text(None) is None

    def test_slugify_title(self):
        assert slugify_title("Board  Election: 2030!", now_ms=42) == (
            "board-election-2030-42"
        )

    def test_slugify_empty_title(self):
        assert slugify_title("", now_ms=42) == "election-42"

    def test_slugify_truncates_long_titles(self):
        slug = slugify_title("x" * 80, now_ms=1)

        assert slug == "x" * 50 + "-1"

    def test_decode_json_field(self):
        assert decode_json_field('["US"]', "countries") == ["US"]
        assert decode_json_field(["US"], "countries") == ["US"]
        assert decode_json_field("  ", "countries") is None

    def test_decode_json_field_invalid(self):
        with pytest.raises(ValueError, match="countries must be valid JSON"):
            decode_json_field("[US", "countries")


class TestParseSchedule:
    """Schedule normalization."""

    def test_bare_date_gets_default_times(self, parser):
        dto = parser.parse(make_payload())

        assert dto.start.date == date(2030, 1, 1)
        assert dto.start.time == "09:00"
        assert dto.end.date == date(2030, 1, 31)
        assert dto.end.time == "18:00"

    def test_object_form(self, parser):
        dto = parser.parse(
            make_payload(
                startDate={"date": "2030-01-01", "time": "08:30"},
                endDate={"date": "2030-01-01", "time": "20:00"},
            )
        )

        assert dto.start.time == "08:30"
        assert dto.end.time == "20:00"

    def test_object_form_as_json_text(self, parser):
        dto = parser.parse(
            make_payload(startDate=json.dumps({"date": "2030-01-02", "time": "07:15"}))
        )

        assert dto.start.date == date(2030, 1, 2)
        assert dto.start.time == "07:15"

    def test_flat_time_fields(self, parser):
        dto = parser.parse(make_payload(startTime="10:00", endTime="11:00"))

        assert dto.start.time == "10:00"
        assert dto.end.time == "11:00"

    def test_end_must_be_after_start(self, parser):
        errors = _errors(
            parser,
            make_payload(
                startDate={"date": "2030-01-01", "time": "10:00"},
                endDate={"date": "2030-01-01", "time": "09:00"},
            ),
        )

        assert "End date must be after start date" in errors

    def test_missing_dates(self, parser):
        payload = make_payload()
        del payload["startDate"]
        payload["endDate"] = ""

        errors = _errors(parser, payload)

        assert "Start date is required" in errors
        assert "End date is required" in errors

    def test_bad_time_format(self, parser):
        errors = _errors(parser, make_payload(startTime="9am"))

        assert "Start time must be in HH:MM format" in errors

    def test_published_election_cannot_end_in_the_past(self, parser):
        errors = _errors(
            parser,
            make_payload(
                startDate="2020-01-01", endDate="2020-02-01", isPublished=True
            ),
        )

        assert "A published election cannot end in the past" in errors

    def test_draft_may_end_in_the_past(self, parser):
        dto = parser.parse(make_payload(startDate="2020-01-01", endDate="2020-02-01"))

        assert dto.is_published is False

    def test_unknown_timezone(self, parser):
        errors = _errors(parser, make_payload(timezone="Mars/Olympus"))

        assert "Unknown timezone: Mars/Olympus" in errors


class TestParseFields:
    """Scalar fields, toggles and collections."""

    def test_minimal_payload(self, parser):
        dto = parser.parse(make_payload())

        assert dto.title == "Board Election 2030"
        assert dto.creator_id == 7
        assert dto.timezone == "UTC"
        assert dto.custom_voting_url.startswith("board-election-2030-")
        assert dto.reward is None
        assert dto.media.is_empty

    def test_accepts_json_text_payload(self, parser):
        dto = parser.parse(json.dumps(make_payload()))

        assert dto.title == "Board Election 2030"

    def test_rejects_invalid_json_text(self, parser):
        assert _errors(parser, "{not json") == ["Payload must be valid JSON"]

    def test_rejects_non_object_payload(self, parser):
        assert _errors(parser, "[1, 2]") == ["Payload must be an object"]

    def test_toggles_default_when_absent(self, parser):
        dto = parser.parse(make_payload())

        assert dto.allow_oauth is True
        assert dto.allow_magic_link is True
        assert dto.allow_email_password is True
        assert dto.biometric_required is False
        assert dto.show_live_results is True
        assert dto.allow_vote_editing is True
        assert dto.is_draft is True

    def test_explicit_false_toggle_is_kept(self, parser):
        dto = parser.parse(
            make_payload(allowOauth=False, showLiveResults="false", isDraft=False)
        )

        assert dto.allow_oauth is False
        assert dto.show_live_results is False
        assert dto.is_draft is False

    def test_collections_as_json_text(self, parser):
        dto = parser.parse(
            make_payload(
                permissionToVote="country_specific",
                countries='["US", "CA"]',
                brandColors='{"primary": "#112233"}',
                questions=json.dumps(make_payload()["questions"]),
            )
        )

        assert dto.countries == ["US", "CA"]
        assert dto.permission_to_vote is PermissionToVote.COUNTRY_SPECIFIC
        assert dto.brand_colors == {"primary": "#112233"}
        assert len(dto.questions) == 1

    def test_invalid_json_collection(self, parser):
        errors = _errors(parser, make_payload(countries="[US"))

        assert errors == ["countries: countries must be valid JSON"]

    def test_text_is_sanitized(self, parser):
        dto = parser.parse(
            make_payload(title="<script>x()</script> Spring vote", customVotingUrl="")
        )

        assert dto.title == "Spring vote"

    def test_missing_required_fields_reports_all(self, parser):
        payload = make_payload(title="  ", description=None)
        del payload["creatorId"]

        errors = _errors(parser, payload)

        assert "Election title is required" in errors
        assert "Election description is required" in errors
        assert "Creator id is required" in errors

    def test_invalid_enum(self, parser):
        errors = _errors(parser, make_payload(votingType="borda"))

        assert len(errors) == 1
        assert errors[0].startswith("votingType: ")

    def test_general_pricing_needs_fee(self, parser):
        errors = _errors(parser, make_payload(pricingType="general"))

        assert "Participation fee must be greater than 0 for paid elections" in errors

    def test_general_pricing(self, parser):
        dto = parser.parse(make_payload(pricingType="general", participationFee="4.50"))

        assert dto.pricing_type is PricingType.GENERAL
        assert dto.participation_fee == Decimal("4.50")

    def test_regional_pricing_needs_a_positive_fee(self, parser):
        errors = _errors(
            parser, make_payload(pricingType="regional", regionalFees={"US": 0})
        )

        assert (
            "At least one regional fee must be greater than 0 for regional pricing"
            in errors
        )

    def test_country_specific_needs_countries(self, parser):
        errors = _errors(parser, make_payload(permissionToVote="country_specific"))

        assert (
            "At least one country must be selected for country-specific elections"
            in errors
        )


class TestParseQuestions:
    """Questions and answers."""

    def test_question_fields(self, parser):
        dto = parser.parse(make_payload())

        question = dto.questions[0]
        assert question.text == "Who should chair?"
        assert question.external_id == "q1"
        assert question.question_type is QuestionType.MULTIPLE_CHOICE
        assert question.is_required is True
        assert [a.text for a in question.answers] == ["Alice", "Bob"]
        assert [a.external_id for a in question.answers] == ["a1", "a2"]

    def test_numeric_ids_become_strings(self, parser):
        dto = parser.parse(
            make_payload(
                questions=[
                    {
                        "id": 17,
                        "text": "Pick",
                        "answers": [
                            {"id": 1, "answerText": "A"},
                            {"id": 2, "answerText": "B"},
                        ],
                    }
                ]
            )
        )

        assert dto.questions[0].external_id == "17"
        assert dto.questions[0].answers[1].external_id == "2"
        assert dto.questions[0].answers[1].text == "B"

    def test_choice_question_needs_two_answers(self, parser):
        errors = _errors(
            parser,
            make_payload(
                questions=[{"questionText": "Pick", "answers": [{"text": "Only"}]}]
            ),
        )

        assert "Question 1: At least 2 answers are required" in errors

    def test_open_text_question_needs_no_answers(self, parser):
        dto = parser.parse(
            make_payload(
                questions=[
                    {
                        "questionText": "Comments?",
                        "questionType": "open_text",
                        "characterLimit": 200,
                    }
                ]
            )
        )

        assert dto.questions[0].answers == []
        assert dto.questions[0].character_limit == 200

    def test_blank_question_and_answer_text(self, parser):
        errors = _errors(
            parser,
            make_payload(
                questions=[
                    {"questionText": " ", "answers": [{"text": "A"}, {"text": ""}]}
                ]
            ),
        )

        assert "Question 1: Question text is required" in errors
        assert "Question 1, Answer 2: Answer text is required" in errors

    def test_election_without_questions(self, parser):
        dto = parser.parse(make_payload(questions=[]))

        assert dto.questions == []


class TestParseLengths:
    """Column length bounds are enforced before anything is written."""

    def test_title_up_to_500_characters(self, parser):
        dto = parser.parse(make_payload(title="t" * 500))

        assert len(dto.title) == 500

    def test_overlong_title(self, parser):
        errors = _errors(parser, make_payload(title="t" * 501))

        assert errors == ["title: String should have at most 500 characters"]

    def test_overlong_urls(self, parser):
        errors = _errors(
            parser,
            make_payload(customVotingUrl="u" * 256, topicVideoUrl="v" * 501),
        )

        assert "customVotingUrl: String should have at most 255 characters" in errors
        assert "topicVideoUrl: String should have at most 500 characters" in errors

    def test_overlong_external_ids(self, parser):
        errors = _errors(
            parser,
            make_payload(
                questions=[
                    {
                        "id": "q" * 256,
                        "questionText": "Pick",
                        "answers": [
                            {"id": "a" * 256, "text": "A"},
                            {"id": "a2", "text": "B"},
                        ],
                    }
                ]
            ),
        )

        assert len(errors) == 2
        assert all("at most 255 characters" in error for error in errors)
        assert any(error.startswith("questions.0.id") for error in errors)
        assert any(error.startswith("questions.0.answers.0.id") for error in errors)

    def test_overlong_timezone(self, parser):
        errors = _errors(parser, make_payload(timezone="Z" * 65))

        assert errors == ["timezone: String should have at most 64 characters"]


class TestParseReward:
    """Lottery settings."""

    def test_disabled_lottery_gives_no_reward(self, parser):
        dto = parser.parse(make_payload(lottery={"isLotterized": False}))

        assert dto.reward is None

    def test_nested_lottery(self, parser):
        dto = parser.parse(
            make_payload(
                lottery={
                    "isLotterized": True,
                    "rewardType": "monetary",
                    "rewardAmount": 100,
                    "winnerCount": 3,
                }
            )
        )

        assert dto.reward is not None
        assert dto.reward.reward_type is RewardType.MONETARY
        assert dto.reward.reward_amount == Decimal("100")
        assert dto.reward.winner_count == 3

    def test_lottery_as_json_text_with_enabled_alias(self, parser):
        dto = parser.parse(
            make_payload(
                lottery=json.dumps({"enabled": True, "rewardType": "non_monetary"})
            )
        )

        assert dto.reward is not None
        assert dto.reward.reward_type is RewardType.NON_MONETARY
        assert dto.reward.non_monetary_reward is None

    def test_flat_lottery_fields(self, parser):
        dto = parser.parse(
            make_payload(isLotterized="true", rewardAmount="25.5", winnerCount=2)
        )

        assert dto.reward is not None
        assert dto.reward.reward_type is RewardType.MONETARY
        assert dto.reward.reward_amount == Decimal("25.5")
        assert dto.reward.winner_count == 2

    def test_winner_count_bounds(self, parser):
        for count in (0, 101):
            errors = _errors(
                parser, make_payload(lottery={"enabled": True, "winnerCount": count})
            )

            assert "Winner count must be between 1 and 100" in errors

    def test_negative_amount(self, parser):
        errors = _errors(
            parser, make_payload(lottery={"enabled": True, "rewardAmount": -1})
        )

        assert "Reward amount cannot be negative" in errors


class TestParseMedia:
    """Media slot validation."""

    def test_media_slots(self, parser):
        topic = make_upload("topic.png")
        answer = make_upload("a1.webp", "image/webp")

        dto = parser.parse(
            make_payload(), {"topicImage": topic, "answerImages": [answer]}
        )

        assert dto.media.topic_image is topic
        assert dto.media.answer_images == [answer]
        assert dto.media.is_empty is False

    def test_rejects_unsupported_type(self, parser):
        errors = _errors(
            parser, make_payload(), {"topicImage": make_upload("t.gif", "image/gif")}
        )

        assert errors == ["topicImage: t.gif is not a JPEG, PNG or WebP image"]

    def test_rejects_oversized_logo(self, parser):
        big = make_upload("logo.png", content=b"0" * (2 * MB + 1))

        errors = _errors(parser, make_payload(), {"logoBranding": big})

        assert errors == ["logoBranding: logo.png exceeds 2 MB"]

    def test_rejects_long_filename(self, parser):
        upload = make_upload("q" * 252 + ".png")

        errors = _errors(parser, make_payload(), {"questionImages": [upload]})

        assert errors == ["questionImages: Filename must be at most 255 characters"]

"""Tests for ElectionUpdateBuilder."""

from datetime import date
from decimal import Decimal

import pytest

from src.application.services.election_update_builder import ElectionUpdateBuilder
from src.domain.entities.election import PermissionToVote
from src.domain.exceptions import ElectionValidationException
from tests.fixtures.election_factories import make_election


@pytest.fixture
def builder() -> ElectionUpdateBuilder:
    return ElectionUpdateBuilder()


def _errors(builder: ElectionUpdateBuilder, changes) -> list[str]:
    with pytest.raises(ElectionValidationException) as exc_info:
        builder.build(changes)
    return exc_info.value.errors


class TestElectionUpdateBuilder:
    """Test cases for ElectionUpdateBuilder.build."""

    def test_maps_camel_case_to_columns(self, builder):
        values = builder.build(
            {
                "title": " New title ",
                "votingType": "ranked_choice",
                "allowOauth": "false",
                "participationFee": "12.50",
            }
        )

        assert values == {
            "title": "New title",
            "voting_type": "ranked_choice",
            "allow_oauth": False,
            "participation_fee": Decimal("12.50"),
        }

    def test_schedule_string_form(self, builder):
        values = builder.build({"startDate": "2030-02-01"})

        assert values == {"start_date": date(2030, 2, 1)}

    def test_schedule_object_form(self, builder):
        values = builder.build({"endDate": {"date": "2030-03-01", "time": "17:30"}})

        assert values == {"end_date": date(2030, 3, 1), "end_time": "17:30"}

    def test_permission_sets_country_flag(self, builder):
        values = builder.build({"permissionToVote": "country_specific"})

        assert values == {
            "permission_to_vote": "country_specific",
            "is_country_specific": True,
        }

    def test_pricing_sets_paid_flag(self, builder):
        assert builder.build({"pricingType": "free"}) == {
            "pricing_type": "free",
            "is_paid": False,
        }
        assert builder.build({"pricingType": "regional"})["is_paid"] is True

    def test_json_collections(self, builder):
        values = builder.build(
            {"countries": '["US", "CA"]', "brandColors": None, "regionalFees": {}}
        )

        assert values == {
            "countries": ["US", "CA"],
            "brand_colors": {},
            "regional_fees": {},
        }

    def test_empty_change_set(self, builder):
        assert _errors(builder, {}) == ["No fields to update"]

    def test_reserved_fields_are_rejected(self, builder):
        errors = _errors(
            builder, {"id": 9, "creatorId": 2, "questions": [], "topicImageUrl": "x"}
        )

        assert errors == [
            "id: cannot be updated",
            "creatorId: cannot be updated",
            "questions: cannot be updated",
            "topicImageUrl: cannot be updated",
        ]

    def test_unknown_field(self, builder):
        assert _errors(builder, {"colour": "red"}) == ["colour: unknown field"]

    def test_invalid_values(self, builder):
        errors = _errors(
            builder,
            {"title": "   ", "startTime": "25:00", "votingType": "borda"},
        )

        assert errors[0] == "title: must not be blank"
        assert errors[1] == "startTime: must be in HH:MM format"
        assert errors[2].startswith("votingType: ")

    def test_invalid_json_collection(self, builder):
        assert _errors(builder, {"countries": "[US"}) == [
            "countries: countries must be valid JSON"
        ]

    def test_timezone_must_exist(self, builder):
        assert _errors(builder, {"timezone": "Mars/Base"}) == [
            "timezone: Unknown timezone: Mars/Base"
        ]

    def test_known_timezones(self, builder):
        assert builder.build({"timezone": "UTC"}) == {"timezone": "UTC"}

    def test_length_bounds(self, builder):
        errors = _errors(
            builder,
            {
                "title": "t" * 501,
                "customVotingUrl": "u" * 256,
                "primaryLanguage": "x" * 11,
            },
        )

        assert errors == [
            "title: must be at most 500 characters",
            "customVotingUrl: must be at most 255 characters",
            "primaryLanguage: must be at most 10 characters",
        ]


def _merged_errors(builder: ElectionUpdateBuilder, changes, **current) -> list[str]:
    values = builder.build(changes)
    with pytest.raises(ElectionValidationException) as exc_info:
        builder.check_merged(make_election(**current), values)
    return exc_info.value.errors


class TestCheckMerged:
    """Test cases for ElectionUpdateBuilder.check_merged."""

    def test_end_before_stored_start(self, builder):
        errors = _merged_errors(builder, {"endDate": "2000-01-01"})

        assert errors == ["End date must be after start date"]

    def test_same_day_end_before_start_time(self, builder):
        errors = _merged_errors(
            builder,
            {
                "startDate": "2030-01-31",
                "endDate": {"date": "2030-01-31", "time": "08:00"},
            },
        )

        assert errors == ["End date must be after start date"]

    def test_general_pricing_needs_a_stored_or_new_fee(self, builder):
        errors = _merged_errors(builder, {"pricingType": "general"})

        assert errors == [
            "Participation fee must be greater than 0 for paid elections"
        ]
        builder.check_merged(
            make_election(participation_fee=Decimal("5")),
            builder.build({"pricingType": "general"}),
        )
        builder.check_merged(
            make_election(),
            builder.build({"pricingType": "general", "participationFee": "2"}),
        )

    def test_regional_pricing_needs_a_positive_fee(self, builder):
        errors = _merged_errors(
            builder, {"pricingType": "regional", "regionalFees": {"US": 0}}
        )

        assert errors == [
            "At least one regional fee must be greater than 0 for regional pricing"
        ]

    def test_country_specific_needs_countries(self, builder):
        errors = _merged_errors(builder, {"permissionToVote": "country_specific"})

        assert errors == [
            "At least one country must be selected for country-specific elections"
        ]
        builder.check_merged(
            make_election(countries=["DE"]),
            builder.build({"permissionToVote": "country_specific"}),
        )

    def test_removing_countries_from_a_country_specific_election(self, builder):
        errors = _merged_errors(
            builder,
            {"countries": "[]"},
            permission_to_vote=PermissionToVote.COUNTRY_SPECIFIC,
            countries=["DE"],
        )

        assert errors == [
            "At least one country must be selected for country-specific elections"
        ]

    def test_consistent_update_passes(self, builder):
        builder.check_merged(
            make_election(),
            builder.build({"title": "Renamed", "endDate": "2030-02-28"}),
        )

"""Allow-listed field updates for an existing election."""

from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from src.application.services.election_payload_parser import (
    CUSTOM_URL_MAX_LENGTH,
    LANGUAGE_MAX_LENGTH,
    TIME_PATTERN,
    TIMEZONE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    SchedulePayload,
    consistency_errors,
    decode_json_field,
    resolve_timezone,
    sanitize_text,
    schedule_input,
)
from src.domain.entities.election import (
    AuthMethod,
    Election,
    PermissionToVote,
    PricingType,
    VotingType,
)
from src.domain.exceptions import ElectionValidationException
from src.domain.value_objects.schedule_point import SchedulePoint


_TEXT = TypeAdapter(str)
_OPTIONAL_TEXT = TypeAdapter(str | None)
_BOOL = TypeAdapter(bool)
_DECIMAL = TypeAdapter(Decimal)
_COUNTRIES = TypeAdapter(list[str])
_FEES = TypeAdapter(dict[str, float])
_MAPPING = TypeAdapter(dict[str, Any])
_SCHEDULE = TypeAdapter(SchedulePayload)


def _check_length(text: str, max_length: int | None) -> None:
    if max_length is not None and len(text) > max_length:
        raise ValueError(f"must be at most {max_length} characters")


def _required_text(max_length: int | None = None) -> Callable[[Any], str]:
    def coerce(value: Any) -> str:
        text = sanitize_text(_TEXT.validate_python(value)) or ""
        if not text:
            raise ValueError("must not be blank")
        _check_length(text, max_length)
        return text

    return coerce


def _optional_text(max_length: int | None = None) -> Callable[[Any], str | None]:
    def coerce(value: Any) -> str | None:
        text = sanitize_text(_OPTIONAL_TEXT.validate_python(value)) or None
        if text is not None:
            _check_length(text, max_length)
        return text

    return coerce


def _timezone(value: Any) -> str:
    name = _required_text(TIMEZONE_MAX_LENGTH)(value)
    resolve_timezone(name)
    return name


def _css(value: Any) -> str:
    return _OPTIONAL_TEXT.validate_python(value) or ""


def _clock(value: Any) -> str:
    clock = _TEXT.validate_python(value)
    if not TIME_PATTERN.match(clock):
        raise ValueError("must be in HH:MM format")
    return clock


def _enum(enum_type: type[Enum]) -> Callable[[Any], Any]:
    adapter = TypeAdapter(enum_type)
    return lambda value: adapter.validate_python(value).value


def _json(
    adapter: TypeAdapter[Any], name: str, empty: Callable[[], Any]
) -> Callable[[Any], Any]:
    def coerce(value: Any) -> Any:
        decoded = decode_json_field(value, name)
        return adapter.validate_python(empty() if decoded is None else decoded)

    return coerce


# camelCase input key -> (column, coercer)
UPDATABLE_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "title": ("title", _required_text(TITLE_MAX_LENGTH)),
    "description": ("description", _required_text()),
    "topicVideoUrl": ("topic_video_url", _optional_text(URL_MAX_LENGTH)),
    "customVotingUrl": (
        "custom_voting_url",
        _optional_text(CUSTOM_URL_MAX_LENGTH),
    ),
    "startTime": ("start_time", _clock),
    "endTime": ("end_time", _clock),
    "timezone": ("timezone", _timezone),
    "votingType": ("voting_type", _enum(VotingType)),
    "authMethod": ("auth_method", _enum(AuthMethod)),
    "biometricRequired": ("biometric_required", _BOOL.validate_python),
    "allowOauth": ("allow_oauth", _BOOL.validate_python),
    "allowMagicLink": ("allow_magic_link", _BOOL.validate_python),
    "allowEmailPassword": ("allow_email_password", _BOOL.validate_python),
    "countries": ("countries", _json(_COUNTRIES, "countries", list)),
    "participationFee": ("participation_fee", _DECIMAL.validate_python),
    "regionalFees": ("regional_fees", _json(_FEES, "regionalFees", dict)),
    "processingFeePercentage": (
        "processing_fee_percentage",
        _DECIMAL.validate_python,
    ),
    "projectedRevenue": ("projected_revenue", _DECIMAL.validate_python),
    "revenueSharePercentage": ("revenue_share_percentage", _DECIMAL.validate_python),
    "showLiveResults": ("show_live_results", _BOOL.validate_python),
    "allowVoteEditing": ("allow_vote_editing", _BOOL.validate_python),
    "customCss": ("custom_css", _css),
    "brandColors": ("brand_colors", _json(_MAPPING, "brandColors", dict)),
    "primaryLanguage": (
        "primary_language",
        _required_text(LANGUAGE_MAX_LENGTH),
    ),
    "supportsMultilang": ("supports_multilang", _BOOL.validate_python),
    "isDraft": ("is_draft", _BOOL.validate_python),
    "isPublished": ("is_published", _BOOL.validate_python),
}

SCHEDULE_FIELDS = {"startDate": "start", "endDate": "end"}

RESERVED_FIELDS = frozenset(
    {
        "id",
        "creatorId",
        "questions",
        "lottery",
        "topicImageUrl",
        "logoBrandingUrl",
        "createdAt",
        "updatedAt",
        "lastSaved",
    }
)


class ElectionUpdateBuilder:
    """Turns a camelCase change set into column values.

    Only allow-listed fields can change; child collections, ownership,
    media URLs and timestamps are never writable through this path.
    """

    def build(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a change set.

        Args:
            changes: camelCase key to new value

        Returns:
            Column name to coerced value

        Raises:
            ElectionValidationException: Listing every rejected key or value
        """
        errors: list[str] = []
        values: dict[str, Any] = {}

        if not changes:
            raise ElectionValidationException(["No fields to update"])

        for key, raw in changes.items():
            if key in RESERVED_FIELDS:
                errors.append(f"{key}: cannot be updated")
                continue
            try:
                if key in SCHEDULE_FIELDS:
                    values.update(self._schedule(SCHEDULE_FIELDS[key], raw))
                elif key == "permissionToVote":
                    permission = TypeAdapter(PermissionToVote).validate_python(raw)
                    values["permission_to_vote"] = permission.value
                    values["is_country_specific"] = (
                        permission is PermissionToVote.COUNTRY_SPECIFIC
                    )
                elif key == "pricingType":
                    pricing = TypeAdapter(PricingType).validate_python(raw)
                    values["pricing_type"] = pricing.value
                    values["is_paid"] = pricing is not PricingType.FREE
                elif key in UPDATABLE_FIELDS:
                    column, coerce = UPDATABLE_FIELDS[key]
                    values[column] = coerce(raw)
                else:
                    errors.append(f"{key}: unknown field")
            except ValidationError as e:
                errors.append(f"{key}: {e.errors()[0]['msg']}")
            except ValueError as e:
                errors.append(f"{key}: {e}")

        if errors:
            raise ElectionValidationException(errors)
        return values

    @staticmethod
    def _schedule(prefix: str, raw: Any) -> dict[str, Any]:
        if isinstance(raw, str) and raw.lstrip().startswith("{"):
            raw = decode_json_field(raw, f"{prefix}Date")
        point = _SCHEDULE.validate_python(schedule_input(raw))
        values: dict[str, Any] = {f"{prefix}_date": point.date}
        if point.time is not None:
            values[f"{prefix}_time"] = _clock(point.time)
        return values

    @staticmethod
    def check_merged(current: Election, values: Mapping[str, Any]) -> None:
        """Re-apply the cross-field creation rules to the row as it will be.

        Raises:
            ElectionValidationException: If the merged row breaks a rule
        """
        start = SchedulePoint(
            date=values.get("start_date", current.start.date),
            time=values.get("start_time", current.start.time),
        )
        end = SchedulePoint(
            date=values.get("end_date", current.end.date),
            time=values.get("end_time", current.end.time),
        )
        errors = consistency_errors(
            start,
            end,
            PricingType(values.get("pricing_type", current.pricing_type)),
            values.get("participation_fee", current.participation_fee),
            values.get("regional_fees", current.regional_fees),
            PermissionToVote(
                values.get("permission_to_vote", current.permission_to_vote)
            ),
            values.get("countries", current.countries),
        )
        if errors:
            raise ElectionValidationException(errors)

"""Inbound creation payload parsing and validation.

The raw payload comes from form-style clients: camelCase keys, nested
collections that may be JSON-encoded text, schedule fields given either as
a bare date string or as a ``{date, time}`` object, and booleans that may
arrive as strings. Everything is normalized here, once, into a
``CreateElectionInputDto``; later stages never branch on input shape.
"""

import json
import re
import time

from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime, tzinfo
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from src.application.dtos.election_dto import (
    AnswerInput,
    CreateElectionInputDto,
    MediaInput,
    QuestionInput,
    RewardInput,
)
from src.common.logging import get_logger
from src.domain.entities.election import (
    AuthMethod,
    PermissionToVote,
    PricingType,
    VotingType,
)
from src.domain.entities.question import Question, QuestionType
from src.domain.entities.reward_configuration import RewardType
from src.domain.exceptions import ElectionValidationException
from src.domain.value_objects.media_upload import MediaUpload
from src.domain.value_objects.schedule_point import (
    DEFAULT_END_TIME,
    DEFAULT_START_TIME,
    DEFAULT_TIMEZONE,
    SchedulePoint,
)


logger = get_logger(__name__)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
MAX_FILENAME_LENGTH = 255
MAX_WINNER_COUNT = 100
SLUG_MAX_LENGTH = 50

TITLE_MAX_LENGTH = 500
URL_MAX_LENGTH = 500
CUSTOM_URL_MAX_LENGTH = 255
EXTERNAL_ID_MAX_LENGTH = 255
TIMEZONE_MAX_LENGTH = 64
LANGUAGE_MAX_LENGTH = 10

MB = 1024 * 1024
MEDIA_SIZE_LIMITS = {
    "topicImage": 5 * MB,
    "logoBranding": 2 * MB,
    "questionImages": 3 * MB,
    "answerImages": 2 * MB,
}

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_IFRAME_BLOCK = re.compile(r"<iframe\b[^>]*>.*?</iframe\s*>", re.IGNORECASE | re.DOTALL)
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_text(value: str | None) -> str | None:
    """Strip script/iframe blocks and ``javascript:`` from caller text."""
    if value is None:
        return None
    cleaned = _SCRIPT_BLOCK.sub("", value)
    cleaned = _IFRAME_BLOCK.sub("", cleaned)
    cleaned = _JAVASCRIPT_SCHEME.sub("", cleaned)
    return cleaned.strip()


def slugify_title(title: str | None, now_ms: int | None = None) -> str:
    """Default custom voting URL: title slug plus a millisecond timestamp."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    if not title:
        return f"election-{stamp}"
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")[:SLUG_MAX_LENGTH]
    return f"{slug}-{stamp}"


def decode_json_field(value: Any, field_name: str) -> Any:
    """Decode a collection that may arrive as JSON text.

    Raises:
        ValueError: If the text is not valid JSON
    """
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"{field_name} must be valid JSON") from e


def schedule_input(value: Any) -> Any:
    """Turn the string form of a schedule field into the object form."""
    if isinstance(value, (str, date)):
        return {"date": value}
    return value


def resolve_timezone(name: str) -> tzinfo:
    """``UTC`` without the system tz database, anything else via zoneinfo.

    Raises:
        ValueError: If the zone is unknown
    """
    if name == DEFAULT_TIMEZONE:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def consistency_errors(
    start: SchedulePoint | None,
    end: SchedulePoint | None,
    pricing_type: PricingType,
    participation_fee: Decimal,
    regional_fees: Mapping[str, float],
    permission_to_vote: PermissionToVote,
    countries: list[str],
) -> list[str]:
    """Cross-field rules shared by creation and updates."""
    errors: list[str] = []
    if start and end and end.to_datetime() <= start.to_datetime():
        errors.append("End date must be after start date")
    if pricing_type is PricingType.GENERAL and participation_fee <= 0:
        errors.append("Participation fee must be greater than 0 for paid elections")
    if pricing_type is PricingType.REGIONAL and not any(
        fee > 0 for fee in regional_fees.values()
    ):
        errors.append(
            "At least one regional fee must be greater than 0 for regional pricing"
        )
    if permission_to_vote is PermissionToVote.COUNTRY_SPECIFIC and not countries:
        errors.append(
            "At least one country must be selected for country-specific elections"
        )
    return errors


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class SchedulePayload(_CamelModel):
    """``{date, time}`` schedule object."""

    date: date
    time: str | None = None


class AnswerPayload(_CamelModel):
    text: str | None = Field(
        default=None, validation_alias=AliasChoices("text", "answerText")
    )
    external_id: str | None = Field(
        default=None,
        max_length=EXTERNAL_ID_MAX_LENGTH,
        validation_alias=AliasChoices("id", "externalId"),
    )

    @field_validator("external_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class QuestionPayload(_CamelModel):
    question_text: str | None = Field(
        default=None, validation_alias=AliasChoices("questionText", "text")
    )
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    external_id: str | None = Field(
        default=None,
        max_length=EXTERNAL_ID_MAX_LENGTH,
        validation_alias=AliasChoices("id", "externalId"),
    )
    is_required: bool | None = None
    allow_other_option: bool | None = None
    character_limit: int | None = None
    answers: list[AnswerPayload] = Field(default_factory=list)

    @field_validator("external_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("answers", mode="before")
    @classmethod
    def _decode_answers(cls, value: Any) -> Any:
        return decode_json_field(value, "answers") or []


class LotteryPayload(_CamelModel):
    is_lotterized: bool | None = Field(
        default=None, validation_alias=AliasChoices("isLotterized", "enabled")
    )
    reward_type: RewardType | None = None
    reward_amount: Decimal | None = None
    non_monetary_reward: str | None = None
    winner_count: int | None = None


class ElectionPayload(_CamelModel):
    """Shape and type layer of the creation payload."""

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    creator_id: int | None = None
    topic_video_url: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    custom_voting_url: str | None = Field(
        default=None, max_length=CUSTOM_URL_MAX_LENGTH
    )

    start_date: SchedulePayload | None = None
    end_date: SchedulePayload | None = None
    start_time: str | None = None
    end_time: str | None = None
    timezone: str | None = Field(default=None, max_length=TIMEZONE_MAX_LENGTH)

    voting_type: VotingType = VotingType.PLURALITY
    permission_to_vote: PermissionToVote = PermissionToVote.OPEN
    auth_method: AuthMethod = AuthMethod.PASSKEY
    biometric_required: bool | None = None
    allow_oauth: bool | None = None
    allow_magic_link: bool | None = None
    allow_email_password: bool | None = None

    countries: list[str] = Field(default_factory=list)
    pricing_type: PricingType = PricingType.FREE
    participation_fee: Decimal = Decimal("0")
    regional_fees: dict[str, float] = Field(default_factory=dict)
    processing_fee_percentage: Decimal = Decimal("0")
    projected_revenue: Decimal = Decimal("0")
    revenue_share_percentage: Decimal = Decimal("0")

    show_live_results: bool | None = None
    allow_vote_editing: bool | None = None
    custom_css: str | None = None
    brand_colors: dict[str, Any] = Field(default_factory=dict)
    primary_language: str | None = Field(
        default=None, max_length=LANGUAGE_MAX_LENGTH
    )
    supports_multilang: bool | None = None

    is_draft: bool | None = None
    is_published: bool | None = None

    questions: list[QuestionPayload] = Field(default_factory=list)

    lottery: LotteryPayload | None = None
    is_lotterized: bool | None = None
    reward_type: RewardType | None = None
    reward_amount: Decimal | None = None
    non_monetary_reward: str | None = None
    winner_count: int | None = None

    @field_validator(
        "countries", "regional_fees", "brand_colors", "questions", mode="before"
    )
    @classmethod
    def _decode_collections(cls, value: Any, info: ValidationInfo) -> Any:
        decoded = decode_json_field(value, to_camel(info.field_name))
        if decoded is None:
            return {} if info.field_name in ("regional_fees", "brand_colors") else []
        return decoded

    @field_validator("lottery", mode="before")
    @classmethod
    def _decode_lottery(cls, value: Any) -> Any:
        return decode_json_field(value, "lottery")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_schedule(cls, value: Any) -> Any:
        if isinstance(value, str) and value.lstrip().startswith("{"):
            value = decode_json_field(value, "schedule")
        if value in (None, ""):
            return None
        return schedule_input(value)


def _resolve(flag: bool | None, default: bool) -> bool:
    """Tri-state toggle: an explicit value wins, absence means the default."""
    return default if flag is None else flag


class ElectionPayloadParser:
    """Turns a raw creation payload into a validated input DTO."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        """Initialize the parser.

        Args:
            clock: Returns the current UTC time; injectable for tests
        """
        self._clock = clock or (lambda: datetime.now(UTC))

    def parse(
        self,
        payload: Mapping[str, Any] | str,
        files: Mapping[str, Any] | None = None,
    ) -> CreateElectionInputDto:
        """Parse and validate a creation request.

        Args:
            payload: Raw mapping (or JSON text) with camelCase keys
            files: Media keyed by slot: ``topicImage``, ``logoBranding``
                (single uploads), ``questionImages``, ``answerImages`` (lists)

        Returns:
            Normalized CreateElectionInputDto

        Raises:
            ElectionValidationException: Listing every problem found
        """
        raw = self._load(payload)
        try:
            model = ElectionPayload.model_validate(raw)
        except ValidationError as e:
            messages = [self._format_error(err) for err in e.errors()]
            logger.info(f"Election payload rejected: {messages}")
            raise ElectionValidationException(messages) from e

        errors: list[str] = []
        dto = self._build(model, errors)
        media = self._media(files or {}, errors)
        if errors or dto is None:
            logger.info(f"Election payload rejected: {errors}")
            raise ElectionValidationException(errors)

        dto.media = media
        return dto

    @staticmethod
    def _load(payload: Mapping[str, Any] | str) -> dict[str, Any]:
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise ElectionValidationException(
                    ["Payload must be valid JSON"]
                ) from e
        if not isinstance(payload, Mapping):
            raise ElectionValidationException(["Payload must be an object"])
        return dict(payload)

    @staticmethod
    def _format_error(error: Mapping[str, Any]) -> str:
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        return f"{location}: {message}" if location else message

    def _build(
        self, model: ElectionPayload, errors: list[str]
    ) -> CreateElectionInputDto | None:
        title = sanitize_text(model.title) or ""
        description = sanitize_text(model.description) or ""
        if not title:
            errors.append("Election title is required")
        if not description:
            errors.append("Election description is required")
        if model.creator_id is None:
            errors.append("Creator id is required")

        start = self._schedule_point(
            model.start_date, model.start_time, DEFAULT_START_TIME, "Start", errors
        )
        end = self._schedule_point(
            model.end_date, model.end_time, DEFAULT_END_TIME, "End", errors
        )

        timezone = model.timezone or DEFAULT_TIMEZONE
        zone = self._zone(timezone, errors)

        countries = [c for c in model.countries if c]
        errors.extend(
            consistency_errors(
                start,
                end,
                model.pricing_type,
                model.participation_fee,
                model.regional_fees,
                model.permission_to_vote,
                countries,
            )
        )

        is_published = _resolve(model.is_published, False)
        if (
            is_published
            and start
            and end
            and zone is not None
            and end.to_datetime().replace(tzinfo=zone) < self._clock()
        ):
            errors.append("A published election cannot end in the past")

        questions = self._questions(model, errors)
        reward = self._reward(model, errors)

        if errors or start is None or end is None or model.creator_id is None:
            return None

        custom_url = sanitize_text(model.custom_voting_url) or slugify_title(title)

        return CreateElectionInputDto(
            title=title,
            description=description,
            creator_id=model.creator_id,
            start=start,
            end=end,
            timezone=timezone,
            topic_video_url=model.topic_video_url or None,
            custom_voting_url=custom_url,
            voting_type=model.voting_type,
            permission_to_vote=model.permission_to_vote,
            auth_method=model.auth_method,
            biometric_required=_resolve(model.biometric_required, False),
            allow_oauth=_resolve(model.allow_oauth, True),
            allow_magic_link=_resolve(model.allow_magic_link, True),
            allow_email_password=_resolve(model.allow_email_password, True),
            countries=countries,
            pricing_type=model.pricing_type,
            participation_fee=model.participation_fee,
            regional_fees=dict(model.regional_fees),
            processing_fee_percentage=model.processing_fee_percentage,
            projected_revenue=model.projected_revenue,
            revenue_share_percentage=model.revenue_share_percentage,
            show_live_results=_resolve(model.show_live_results, True),
            allow_vote_editing=_resolve(model.allow_vote_editing, True),
            custom_css=model.custom_css or "",
            brand_colors=dict(model.brand_colors),
            primary_language=model.primary_language or "en",
            supports_multilang=_resolve(model.supports_multilang, False),
            is_draft=_resolve(model.is_draft, True),
            is_published=is_published,
            questions=questions,
            reward=reward,
        )

    @staticmethod
    def _zone(name: str, errors: list[str]) -> tzinfo | None:
        try:
            return resolve_timezone(name)
        except ValueError as e:
            errors.append(str(e))
            return None

    @staticmethod
    def _schedule_point(
        value: SchedulePayload | None,
        flat_time: str | None,
        default_time: str,
        label: str,
        errors: list[str],
    ) -> SchedulePoint | None:
        if value is None:
            errors.append(f"{label} date is required")
            return None
        clock = value.time or flat_time or default_time
        if not TIME_PATTERN.match(clock):
            errors.append(f"{label} time must be in HH:MM format")
            return None
        return SchedulePoint(date=value.date, time=clock)

    @staticmethod
    def _questions(model: ElectionPayload, errors: list[str]) -> list[QuestionInput]:
        questions: list[QuestionInput] = []
        for index, question in enumerate(model.questions, start=1):
            text = sanitize_text(question.question_text) or ""
            if not text:
                errors.append(f"Question {index}: Question text is required")
            if question.question_type.requires_answers and len(question.answers) < 2:
                errors.append(f"Question {index}: At least 2 answers are required")

            answers: list[AnswerInput] = []
            for answer_index, answer in enumerate(question.answers, start=1):
                answer_text = sanitize_text(answer.text) or ""
                if not answer_text:
                    errors.append(
                        f"Question {index}, Answer {answer_index}: "
                        "Answer text is required"
                    )
                answers.append(
                    AnswerInput(text=answer_text, external_id=answer.external_id)
                )

            limit = question.character_limit
            if limit is not None and limit < 1:
                errors.append(f"Question {index}: Character limit must be positive")

            questions.append(
                QuestionInput(
                    text=text,
                    question_type=question.question_type,
                    external_id=question.external_id,
                    is_required=_resolve(question.is_required, True),
                    allow_other_option=_resolve(question.allow_other_option, False),
                    character_limit=limit or Question.DEFAULT_CHARACTER_LIMIT,
                    answers=answers,
                )
            )
        return questions

    @staticmethod
    def _reward(model: ElectionPayload, errors: list[str]) -> RewardInput | None:
        lottery = model.lottery or LotteryPayload()
        enabled = lottery.is_lotterized
        if enabled is None:
            enabled = model.is_lotterized
        if not enabled:
            return None

        reward_type = lottery.reward_type or model.reward_type or RewardType.MONETARY
        amount = lottery.reward_amount
        if amount is None:
            amount = model.reward_amount
        winner_count = lottery.winner_count
        if winner_count is None:
            winner_count = model.winner_count
        description = lottery.non_monetary_reward or model.non_monetary_reward

        amount = amount if amount is not None else Decimal("0")
        winner_count = winner_count if winner_count is not None else 1
        if amount < 0:
            errors.append("Reward amount cannot be negative")
        if not 1 <= winner_count <= MAX_WINNER_COUNT:
            errors.append(f"Winner count must be between 1 and {MAX_WINNER_COUNT}")

        return RewardInput(
            reward_type=reward_type,
            reward_amount=amount,
            non_monetary_reward=sanitize_text(description),
            winner_count=winner_count,
        )

    def _media(self, files: Mapping[str, Any], errors: list[str]) -> MediaInput:
        media = MediaInput(
            topic_image=files.get("topicImage"),
            logo_branding=files.get("logoBranding"),
            question_images=list(files.get("questionImages") or []),
            answer_images=list(files.get("answerImages") or []),
        )
        slots: list[tuple[str, MediaUpload]] = []
        if media.topic_image:
            slots.append(("topicImage", media.topic_image))
        if media.logo_branding:
            slots.append(("logoBranding", media.logo_branding))
        slots.extend(("questionImages", upload) for upload in media.question_images)
        slots.extend(("answerImages", upload) for upload in media.answer_images)

        for slot, upload in slots:
            self._check_upload(slot, upload, errors)
        return media

    @staticmethod
    def _check_upload(slot: str, upload: MediaUpload, errors: list[str]) -> None:
        if not upload.filename:
            errors.append(f"{slot}: Filename is required")
        elif len(upload.filename) > MAX_FILENAME_LENGTH:
            errors.append(
                f"{slot}: Filename must be at most {MAX_FILENAME_LENGTH} characters"
            )
        if upload.content_type.lower() not in ALLOWED_IMAGE_TYPES:
            errors.append(f"{slot}: {upload.filename} is not a JPEG, PNG or WebP image")
        limit = MEDIA_SIZE_LIMITS[slot]
        if upload.size > limit:
            errors.append(f"{slot}: {upload.filename} exceeds {limit // MB} MB")

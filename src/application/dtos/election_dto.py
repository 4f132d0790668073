"""DTOs for creating, reading, updating and deleting election aggregates."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from src.domain.entities.answer import Answer
from src.domain.entities.election import (
    AuthMethod,
    Election,
    PermissionToVote,
    PricingType,
    VotingType,
)
from src.domain.entities.question import Question, QuestionType
from src.domain.entities.reward_configuration import RewardConfiguration, RewardType
from src.domain.value_objects.media_upload import MediaUpload
from src.domain.value_objects.schedule_point import DEFAULT_TIMEZONE, SchedulePoint


# =============================================================================
# Input DTOs
# =============================================================================


@dataclass
class AnswerInput:
    """One answer option, in caller order."""

    text: str
    external_id: str | None = None


@dataclass
class QuestionInput:
    """One question with its answer options, in caller order."""

    text: str
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    external_id: str | None = None
    is_required: bool = True
    allow_other_option: bool = False
    character_limit: int = Question.DEFAULT_CHARACTER_LIMIT
    answers: list[AnswerInput] = field(default_factory=list)


@dataclass
class RewardInput:
    """Requested lottery reward; only present when the lottery is enabled."""

    reward_type: RewardType = RewardType.MONETARY
    reward_amount: Decimal = Decimal("0")
    non_monetary_reward: str | None = None
    winner_count: int = 1


@dataclass
class MediaInput:
    """Files supplied for the named media slots."""

    topic_image: MediaUpload | None = None
    logo_branding: MediaUpload | None = None
    question_images: list[MediaUpload] = field(default_factory=list)
    answer_images: list[MediaUpload] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.topic_image
            or self.logo_branding
            or self.question_images
            or self.answer_images
        )


@dataclass
class CreateElectionInputDto:
    """Normalized creation request.

    Produced by the payload parser: schedule already canonical, JSON
    collections decoded and toggles resolved to their defaults.
    """

    title: str
    description: str
    creator_id: int
    start: SchedulePoint
    end: SchedulePoint
    timezone: str = DEFAULT_TIMEZONE
    topic_video_url: str | None = None
    custom_voting_url: str | None = None
    voting_type: VotingType = VotingType.PLURALITY
    permission_to_vote: PermissionToVote = PermissionToVote.OPEN
    auth_method: AuthMethod = AuthMethod.PASSKEY
    biometric_required: bool = False
    allow_oauth: bool = True
    allow_magic_link: bool = True
    allow_email_password: bool = True
    countries: list[str] = field(default_factory=list)
    pricing_type: PricingType = PricingType.FREE
    participation_fee: Decimal = Decimal("0")
    regional_fees: dict[str, Any] = field(default_factory=dict)
    processing_fee_percentage: Decimal = Decimal("0")
    projected_revenue: Decimal = Decimal("0")
    revenue_share_percentage: Decimal = Decimal("0")
    show_live_results: bool = True
    allow_vote_editing: bool = True
    custom_css: str = ""
    brand_colors: dict[str, Any] = field(default_factory=dict)
    primary_language: str = "en"
    supports_multilang: bool = False
    is_draft: bool = True
    is_published: bool = False
    questions: list[QuestionInput] = field(default_factory=list)
    reward: RewardInput | None = None
    media: MediaInput = field(default_factory=MediaInput)

    def to_entity(self) -> Election:
        """Build the unsaved root entity; questions are written separately."""
        return Election(
            title=self.title,
            description=self.description,
            start=self.start,
            end=self.end,
            creator_id=self.creator_id,
            timezone=self.timezone,
            topic_video_url=self.topic_video_url,
            custom_voting_url=self.custom_voting_url,
            voting_type=self.voting_type,
            permission_to_vote=self.permission_to_vote,
            auth_method=self.auth_method,
            biometric_required=self.biometric_required,
            allow_oauth=self.allow_oauth,
            allow_magic_link=self.allow_magic_link,
            allow_email_password=self.allow_email_password,
            is_country_specific=(
                self.permission_to_vote is PermissionToVote.COUNTRY_SPECIFIC
            ),
            countries=list(self.countries),
            pricing_type=self.pricing_type,
            is_paid=self.pricing_type is not PricingType.FREE,
            participation_fee=self.participation_fee,
            regional_fees=dict(self.regional_fees),
            processing_fee_percentage=self.processing_fee_percentage,
            projected_revenue=self.projected_revenue,
            revenue_share_percentage=self.revenue_share_percentage,
            show_live_results=self.show_live_results,
            allow_vote_editing=self.allow_vote_editing,
            custom_css=self.custom_css,
            brand_colors=dict(self.brand_colors),
            primary_language=self.primary_language,
            supports_multilang=self.supports_multilang,
            is_draft=self.is_draft,
            is_published=self.is_published,
            last_saved=datetime.now(UTC).replace(tzinfo=None),
        )


@dataclass
class GetElectionInputDto:
    """Input for reading one aggregate."""

    id: int


@dataclass
class UpdateElectionInputDto:
    """Input for updating election fields.

    ``changes`` uses the same camelCase keys as the creation payload.
    """

    id: int
    changes: dict[str, Any]


@dataclass
class DeleteElectionInputDto:
    """Input for deleting an election and everything it owns."""

    id: int


# =============================================================================
# Output DTOs
# =============================================================================


def _money(value: Decimal) -> float:
    return float(value)


@dataclass
class AnswerOutputItem:
    """Answer in the nested read shape."""

    id: int | None
    external_id: str | None
    text: str
    order: int
    image_url: str | None

    @classmethod
    def from_entity(cls, entity: Answer) -> "AnswerOutputItem":
        return cls(
            id=entity.id,
            external_id=entity.answer_external_id,
            text=entity.answer_text,
            order=entity.answer_order,
            image_url=entity.answer_image_url,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "externalId": self.external_id,
            "text": self.text,
            "order": self.order,
            "imageUrl": self.image_url,
        }


@dataclass
class QuestionOutputItem:
    """Question in the nested read shape."""

    id: int | None
    external_id: str | None
    question_text: str
    question_type: str
    order: int
    is_required: bool
    allow_other_option: bool
    character_limit: int
    image_url: str | None
    answers: list[AnswerOutputItem]

    @classmethod
    def from_entity(cls, entity: Question) -> "QuestionOutputItem":
        return cls(
            id=entity.id,
            external_id=entity.question_external_id,
            question_text=entity.question_text,
            question_type=entity.question_type.value,
            order=entity.question_order,
            is_required=entity.is_required,
            allow_other_option=entity.allow_other_option,
            character_limit=entity.character_limit,
            image_url=entity.question_image_url,
            answers=[AnswerOutputItem.from_entity(a) for a in entity.answers],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "externalId": self.external_id,
            "questionText": self.question_text,
            "questionType": self.question_type,
            "order": self.order,
            "isRequired": self.is_required,
            "allowOtherOption": self.allow_other_option,
            "characterLimit": self.character_limit,
            "imageUrl": self.image_url,
            "answers": [a.to_dict() for a in self.answers],
        }


@dataclass
class RewardOutputItem:
    """Lottery section of the nested read shape."""

    is_lotterized: bool
    reward_type: str | None = None
    reward_amount: float = 0.0
    non_monetary_reward: str | None = None
    winner_count: int = 0
    lottery_active: bool = False

    @classmethod
    def from_entity(cls, entity: RewardConfiguration | None) -> "RewardOutputItem":
        """Disabled section when no reward row exists."""
        if entity is None:
            return cls(is_lotterized=False)
        return cls(
            is_lotterized=entity.is_lotterized,
            reward_type=entity.reward_type.value,
            reward_amount=_money(entity.reward_amount),
            non_monetary_reward=entity.non_monetary_reward,
            winner_count=entity.winner_count,
            lottery_active=entity.lottery_active,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "isLotterized": self.is_lotterized,
            "rewardType": self.reward_type,
            "rewardAmount": self.reward_amount,
            "nonMonetaryReward": self.non_monetary_reward,
            "winnerCount": self.winner_count,
            "lotteryActive": self.lottery_active,
        }


@dataclass
class ElectionDetailOutputItem:
    """The whole aggregate as one nested object."""

    election: Election
    questions: list[QuestionOutputItem]
    lottery: RewardOutputItem

    @classmethod
    def from_entity(cls, entity: Election) -> "ElectionDetailOutputItem":
        return cls(
            election=entity,
            questions=[QuestionOutputItem.from_entity(q) for q in entity.questions],
            lottery=RewardOutputItem.from_entity(entity.reward),
        )

    @property
    def id(self) -> int | None:
        return self.election.id

    def to_dict(self) -> dict[str, Any]:
        """camelCase mapping with the schedule as ``{date, time}`` objects."""
        e = self.election
        return {
            "id": e.id,
            "title": e.title,
            "description": e.description,
            "topicImageUrl": e.topic_image_url,
            "topicVideoUrl": e.topic_video_url,
            "logoBrandingUrl": e.logo_branding_url,
            "customVotingUrl": e.custom_voting_url,
            "startDate": e.start.to_dict(),
            "endDate": e.end.to_dict(),
            "timezone": e.timezone,
            "votingType": e.voting_type.value,
            "permissionToVote": e.permission_to_vote.value,
            "authMethod": e.auth_method.value,
            "biometricRequired": e.biometric_required,
            "allowOauth": e.allow_oauth,
            "allowMagicLink": e.allow_magic_link,
            "allowEmailPassword": e.allow_email_password,
            "isCountrySpecific": e.is_country_specific,
            "countries": e.countries,
            "pricingType": e.pricing_type.value,
            "isPaid": e.is_paid,
            "participationFee": _money(e.participation_fee),
            "regionalFees": e.regional_fees,
            "processingFeePercentage": _money(e.processing_fee_percentage),
            "projectedRevenue": _money(e.projected_revenue),
            "revenueSharePercentage": _money(e.revenue_share_percentage),
            "showLiveResults": e.show_live_results,
            "allowVoteEditing": e.allow_vote_editing,
            "customCss": e.custom_css,
            "brandColors": e.brand_colors,
            "primaryLanguage": e.primary_language,
            "supportsMultilang": e.supports_multilang,
            "isDraft": e.is_draft,
            "isPublished": e.is_published,
            "creatorId": e.creator_id,
            "createdAt": e.created_at.isoformat() if e.created_at else None,
            "updatedAt": e.updated_at.isoformat() if e.updated_at else None,
            "lastSaved": e.last_saved.isoformat() if e.last_saved else None,
            "questions": [q.to_dict() for q in self.questions],
            "lottery": self.lottery.to_dict(),
        }


@dataclass
class OptionalFeatureFailure:
    """A best-effort sub-step that failed without affecting the aggregate."""

    feature: str
    message: str
    owner_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature": self.feature,
            "message": self.message,
            "ownerId": self.owner_id,
        }


@dataclass
class CreateElectionOutputDto:
    """Creation envelope."""

    success: bool
    message: str | None = None
    election: ElectionDetailOutputItem | None = None
    election_id: int | None = None
    error_message: str | None = None
    error_detail: str | None = None
    errors: list[str] = field(default_factory=list)
    constraint: str | None = None
    failed_stage: str | None = None
    optional_failures: list[OptionalFeatureFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "message": self.message,
                "electionId": self.election_id,
                "election": self.election.to_dict() if self.election else None,
                "optionalFailures": [f.to_dict() for f in self.optional_failures],
            }
        body: dict[str, Any] = {
            "success": False,
            "message": self.error_message,
            "failedStage": self.failed_stage,
        }
        if self.errors:
            body["errors"] = self.errors
        if self.constraint:
            body["constraint"] = self.constraint
        if self.error_detail:
            body["error"] = self.error_detail
        return body


@dataclass
class GetElectionOutputDto:
    """Read result; ``found`` is False for an unknown id."""

    found: bool
    election: ElectionDetailOutputItem | None = None
    success: bool = True
    error_message: str | None = None


@dataclass
class UpdateElectionOutputDto:
    """Update result with the re-read aggregate."""

    success: bool
    election: ElectionDetailOutputItem | None = None
    error_message: str | None = None
    errors: list[str] = field(default_factory=list)


@dataclass
class DeleteElectionOutputDto:
    """Delete result."""

    success: bool
    error_message: str | None = None
    deleted_assets: int = 0

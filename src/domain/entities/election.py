"""Election entity."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from src.domain.entities.base import BaseEntity
from src.domain.entities.question import Question
from src.domain.entities.reward_configuration import RewardConfiguration
from src.domain.value_objects.schedule_point import DEFAULT_TIMEZONE, SchedulePoint


class VotingType(str, Enum):
    """Voting method selector."""

    PLURALITY = "plurality"
    RANKED_CHOICE = "ranked_choice"
    APPROVAL = "approval"


class PermissionToVote(str, Enum):
    """Who may take part in the election."""

    OPEN = "open"
    COUNTRY_SPECIFIC = "country_specific"
    INVITE_ONLY = "invite_only"


class PricingType(str, Enum):
    """Participation pricing model."""

    FREE = "free"
    GENERAL = "general"
    REGIONAL = "regional"


class AuthMethod(str, Enum):
    """Primary voter authentication method."""

    PASSKEY = "passkey"
    OAUTH = "oauth"
    MAGIC_LINK = "magic_link"
    EMAIL_PASSWORD = "email_password"


class Election(BaseEntity):
    """Root of the election aggregate.

    Owns its questions (and through them the answers), the optional
    reward configuration and the media attachment records.
    """

    def __init__(
        self,
        title: str,
        description: str,
        start: SchedulePoint,
        end: SchedulePoint,
        creator_id: int,
        timezone: str = DEFAULT_TIMEZONE,
        topic_video_url: str | None = None,
        custom_voting_url: str | None = None,
        voting_type: VotingType = VotingType.PLURALITY,
        permission_to_vote: PermissionToVote = PermissionToVote.OPEN,
        auth_method: AuthMethod = AuthMethod.PASSKEY,
        biometric_required: bool = False,
        allow_oauth: bool = True,
        allow_magic_link: bool = True,
        allow_email_password: bool = True,
        is_country_specific: bool = False,
        countries: list[str] | None = None,
        pricing_type: PricingType = PricingType.FREE,
        is_paid: bool = False,
        participation_fee: Decimal = Decimal("0"),
        regional_fees: dict[str, Any] | None = None,
        processing_fee_percentage: Decimal = Decimal("0"),
        projected_revenue: Decimal = Decimal("0"),
        revenue_share_percentage: Decimal = Decimal("0"),
        show_live_results: bool = True,
        allow_vote_editing: bool = True,
        custom_css: str = "",
        brand_colors: dict[str, Any] | None = None,
        primary_language: str = "en",
        supports_multilang: bool = False,
        is_draft: bool = True,
        is_published: bool = False,
        topic_image_url: str | None = None,
        logo_branding_url: str | None = None,
        questions: list[Question] | None = None,
        reward: RewardConfiguration | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        last_saved: datetime | None = None,
        id: int | None = None,
    ) -> None:
        super().__init__(id)
        self.title = title
        self.description = description
        self.topic_video_url = topic_video_url
        self.custom_voting_url = custom_voting_url
        self.start = start
        self.end = end
        self.timezone = timezone
        self.voting_type = voting_type
        self.permission_to_vote = permission_to_vote
        self.auth_method = auth_method
        self.biometric_required = biometric_required
        self.allow_oauth = allow_oauth
        self.allow_magic_link = allow_magic_link
        self.allow_email_password = allow_email_password
        self.is_country_specific = is_country_specific
        self.countries: list[str] = countries if countries is not None else []
        self.pricing_type = pricing_type
        self.is_paid = is_paid
        self.participation_fee = participation_fee
        self.regional_fees: dict[str, Any] = (
            regional_fees if regional_fees is not None else {}
        )
        self.processing_fee_percentage = processing_fee_percentage
        self.projected_revenue = projected_revenue
        self.revenue_share_percentage = revenue_share_percentage
        self.show_live_results = show_live_results
        self.allow_vote_editing = allow_vote_editing
        self.custom_css = custom_css
        self.brand_colors: dict[str, Any] = (
            brand_colors if brand_colors is not None else {}
        )
        self.primary_language = primary_language
        self.supports_multilang = supports_multilang
        self.is_draft = is_draft
        self.is_published = is_published
        self.creator_id = creator_id
        self.topic_image_url = topic_image_url
        self.logo_branding_url = logo_branding_url
        self.questions: list[Question] = questions if questions is not None else []
        self.reward = reward
        self.created_at = created_at
        self.updated_at = updated_at
        self.last_saved = last_saved

    @property
    def is_lotterized(self) -> bool:
        return self.reward is not None and self.reward.is_lotterized

    def __str__(self) -> str:
        return f"{self.title} ({self.start.date} - {self.end.date})"

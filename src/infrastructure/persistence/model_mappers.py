"""Conversions between ORM models and domain entities."""

from decimal import Decimal

from src.domain.entities.answer import Answer
from src.domain.entities.election import (
    AuthMethod,
    Election,
    PermissionToVote,
    PricingType,
    VotingType,
)
from src.domain.entities.media_attachment import MediaAttachment, MediaSlot
from src.domain.entities.question import Question, QuestionType
from src.domain.entities.reward_configuration import RewardConfiguration, RewardType
from src.domain.value_objects.schedule_point import SchedulePoint
from src.infrastructure.persistence.json_columns import dump_json, load_json
from src.infrastructure.persistence.sqlalchemy_models import (
    AnswerModel,
    ElectionModel,
    MediaAttachmentModel,
    QuestionModel,
    RewardConfigurationModel,
)


def _decimal(value: object) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def election_to_entity(model: ElectionModel) -> Election:
    """Convert an election row to an entity without children."""
    return Election(
        id=model.id,
        title=model.title,
        description=model.description,
        topic_video_url=model.topic_video_url,
        custom_voting_url=model.custom_voting_url,
        start=SchedulePoint(date=model.start_date, time=model.start_time),
        end=SchedulePoint(date=model.end_date, time=model.end_time),
        timezone=model.timezone,
        voting_type=VotingType(model.voting_type),
        permission_to_vote=PermissionToVote(model.permission_to_vote),
        auth_method=AuthMethod(model.auth_method),
        biometric_required=bool(model.biometric_required),
        allow_oauth=bool(model.allow_oauth),
        allow_magic_link=bool(model.allow_magic_link),
        allow_email_password=bool(model.allow_email_password),
        is_country_specific=bool(model.is_country_specific),
        countries=load_json(model.countries, []),
        pricing_type=PricingType(model.pricing_type),
        is_paid=bool(model.is_paid),
        participation_fee=_decimal(model.participation_fee),
        regional_fees=load_json(model.regional_fees, {}),
        processing_fee_percentage=_decimal(model.processing_fee_percentage),
        projected_revenue=_decimal(model.projected_revenue),
        revenue_share_percentage=_decimal(model.revenue_share_percentage),
        show_live_results=bool(model.show_live_results),
        allow_vote_editing=bool(model.allow_vote_editing),
        custom_css=model.custom_css or "",
        brand_colors=load_json(model.brand_colors, {}),
        primary_language=model.primary_language,
        supports_multilang=bool(model.supports_multilang),
        is_draft=bool(model.is_draft),
        is_published=bool(model.is_published),
        creator_id=model.creator_id,
        topic_image_url=model.topic_image_url,
        logo_branding_url=model.logo_branding_url,
        created_at=model.created_at,
        updated_at=model.updated_at,
        last_saved=model.last_saved,
    )


def election_to_model(entity: Election) -> ElectionModel:
    """Convert an election entity to a new row; children are not included."""
    return ElectionModel(
        title=entity.title,
        description=entity.description,
        topic_video_url=entity.topic_video_url,
        custom_voting_url=entity.custom_voting_url,
        topic_image_url=entity.topic_image_url,
        logo_branding_url=entity.logo_branding_url,
        start_date=entity.start.date,
        start_time=entity.start.time,
        end_date=entity.end.date,
        end_time=entity.end.time,
        timezone=entity.timezone,
        voting_type=entity.voting_type.value,
        permission_to_vote=entity.permission_to_vote.value,
        auth_method=entity.auth_method.value,
        biometric_required=entity.biometric_required,
        allow_oauth=entity.allow_oauth,
        allow_magic_link=entity.allow_magic_link,
        allow_email_password=entity.allow_email_password,
        is_country_specific=entity.is_country_specific,
        countries=dump_json(entity.countries),
        pricing_type=entity.pricing_type.value,
        is_paid=entity.is_paid,
        participation_fee=entity.participation_fee,
        regional_fees=dump_json(entity.regional_fees),
        processing_fee_percentage=entity.processing_fee_percentage,
        projected_revenue=entity.projected_revenue,
        revenue_share_percentage=entity.revenue_share_percentage,
        show_live_results=entity.show_live_results,
        allow_vote_editing=entity.allow_vote_editing,
        custom_css=entity.custom_css,
        brand_colors=dump_json(entity.brand_colors),
        primary_language=entity.primary_language,
        supports_multilang=entity.supports_multilang,
        is_draft=entity.is_draft,
        is_published=entity.is_published,
        creator_id=entity.creator_id,
        last_saved=entity.last_saved,
    )


def question_to_entity(model: QuestionModel) -> Question:
    return Question(
        id=model.id,
        election_id=model.election_id,
        question_text=model.question_text,
        question_type=QuestionType(model.question_type),
        question_order=model.question_order,
        is_required=bool(model.is_required),
        allow_other_option=bool(model.allow_other_option),
        character_limit=model.character_limit,
        question_external_id=model.question_external_id,
        question_image_url=model.question_image_url,
    )


def question_to_model(entity: Question) -> QuestionModel:
    return QuestionModel(
        election_id=entity.election_id,
        question_text=entity.question_text,
        question_type=entity.question_type.value,
        question_order=entity.question_order,
        is_required=entity.is_required,
        allow_other_option=entity.allow_other_option,
        character_limit=entity.character_limit,
        question_external_id=entity.question_external_id,
        question_image_url=entity.question_image_url,
    )


def answer_to_entity(model: AnswerModel) -> Answer:
    return Answer(
        id=model.id,
        question_id=model.question_id,
        answer_text=model.answer_text,
        answer_order=model.answer_order,
        answer_external_id=model.answer_external_id,
        answer_image_url=model.answer_image_url,
    )


def answer_to_model(entity: Answer) -> AnswerModel:
    return AnswerModel(
        question_id=entity.question_id,
        answer_text=entity.answer_text,
        answer_order=entity.answer_order,
        answer_external_id=entity.answer_external_id,
        answer_image_url=entity.answer_image_url,
    )


def reward_to_entity(model: RewardConfigurationModel) -> RewardConfiguration:
    return RewardConfiguration(
        id=model.id,
        election_id=model.election_id,
        is_lotterized=bool(model.is_lotterized),
        reward_type=RewardType(model.reward_type),
        reward_amount=_decimal(model.reward_amount),
        non_monetary_reward=model.non_monetary_reward,
        winner_count=model.winner_count,
        lottery_active=bool(model.lottery_active),
    )


def reward_to_model(entity: RewardConfiguration) -> RewardConfigurationModel:
    return RewardConfigurationModel(
        election_id=entity.election_id,
        is_lotterized=entity.is_lotterized,
        reward_type=entity.reward_type.value,
        reward_amount=entity.reward_amount,
        non_monetary_reward=entity.non_monetary_reward,
        winner_count=entity.winner_count,
        lottery_active=entity.lottery_active,
    )


def attachment_to_entity(model: MediaAttachmentModel) -> MediaAttachment:
    return MediaAttachment(
        id=model.id,
        election_id=model.election_id,
        image_type=MediaSlot(model.image_type),
        storage_id=model.storage_id,
        url=model.url,
        original_filename=model.original_filename,
        reference_id=model.reference_id,
        created_at=model.created_at,
    )


def attachment_to_model(entity: MediaAttachment) -> MediaAttachmentModel:
    return MediaAttachmentModel(
        election_id=entity.election_id,
        image_type=entity.image_type.value,
        storage_id=entity.storage_id,
        url=entity.url,
        original_filename=entity.original_filename,
        reference_id=entity.reference_id,
    )

"""SQLAlchemy ORM models for the election aggregate tables."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all models."""


class ElectionModel(Base):
    """Election root row."""

    __tablename__ = "elections"
    __table_args__ = (
        CheckConstraint(
            "voting_type IN ('plurality', 'ranked_choice', 'approval')",
            name="ck_elections_voting_type",
        ),
        CheckConstraint(
            "pricing_type IN ('free', 'general', 'regional')",
            name="ck_elections_pricing_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    topic_video_url: Mapped[str | None] = mapped_column(String(500))
    custom_voting_url: Mapped[str | None] = mapped_column(String(255), unique=True)
    topic_image_url: Mapped[str | None] = mapped_column(String(500))
    logo_branding_url: Mapped[str | None] = mapped_column(String(500))

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False, default="09:00")
    end_time: Mapped[str] = mapped_column(String(5), nullable=False, default="18:00")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")

    voting_type: Mapped[str] = mapped_column(String(32), nullable=False)
    permission_to_vote: Mapped[str] = mapped_column(String(32), nullable=False)
    auth_method: Mapped[str] = mapped_column(String(32), nullable=False)
    biometric_required: Mapped[bool] = mapped_column(Boolean, default=False)
    allow_oauth: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_magic_link: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_email_password: Mapped[bool] = mapped_column(Boolean, default=True)

    is_country_specific: Mapped[bool] = mapped_column(Boolean, default=False)
    countries: Mapped[str | None] = mapped_column(Text)

    pricing_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    participation_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    regional_fees: Mapped[str | None] = mapped_column(Text)
    processing_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=0
    )
    projected_revenue: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0)
    revenue_share_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=0
    )

    show_live_results: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_vote_editing: Mapped[bool] = mapped_column(Boolean, default=True)
    custom_css: Mapped[str | None] = mapped_column(Text)
    brand_colors: Mapped[str | None] = mapped_column(Text)
    primary_language: Mapped[str] = mapped_column(String(10), default="en")
    supports_multilang: Mapped[bool] = mapped_column(Boolean, default=False)

    is_draft: Mapped[bool] = mapped_column(Boolean, default=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    creator_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )
    last_saved: Mapped[datetime | None] = mapped_column(DateTime)


class QuestionModel(Base):
    """Question of an election."""

    __tablename__ = "election_questions"
    __table_args__ = (
        UniqueConstraint(
            "election_id", "question_order", name="uq_election_questions_order"
        ),
        UniqueConstraint(
            "election_id",
            "question_external_id",
            name="uq_election_questions_external_id",
        ),
        CheckConstraint(
            "question_type IN "
            "('multiple_choice', 'open_text', 'image_based', 'comparison')",
            name="ck_election_questions_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    election_id: Mapped[int] = mapped_column(
        ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_other_option: Mapped[bool] = mapped_column(Boolean, default=False)
    character_limit: Mapped[int] = mapped_column(Integer, default=5000)
    question_order: Mapped[int] = mapped_column(Integer, nullable=False)
    question_external_id: Mapped[str | None] = mapped_column(String(255))
    question_image_url: Mapped[str | None] = mapped_column(String(500))


class AnswerModel(Base):
    """Answer option of a question."""

    __tablename__ = "question_answers"
    __table_args__ = (
        UniqueConstraint(
            "question_id", "answer_order", name="uq_question_answers_order"
        ),
        UniqueConstraint(
            "question_id",
            "answer_external_id",
            name="uq_question_answers_external_id",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("election_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    answer_order: Mapped[int] = mapped_column(Integer, nullable=False)
    answer_external_id: Mapped[str | None] = mapped_column(String(255))
    answer_image_url: Mapped[str | None] = mapped_column(String(500))


class RewardConfigurationModel(Base):
    """Lottery configuration, at most one per election."""

    __tablename__ = "election_lotteries"
    __table_args__ = (
        CheckConstraint(
            "reward_type IN ('monetary', 'non_monetary')",
            name="ck_election_lotteries_reward_type",
        ),
        CheckConstraint(
            "winner_count >= 1", name="ck_election_lotteries_winner_count"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    election_id: Mapped[int] = mapped_column(
        ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    is_lotterized: Mapped[bool] = mapped_column(Boolean, default=True)
    reward_type: Mapped[str] = mapped_column(String(32), nullable=False)
    reward_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    non_monetary_reward: Mapped[str | None] = mapped_column(Text)
    winner_count: Mapped[int] = mapped_column(Integer, default=1)
    lottery_active: Mapped[bool] = mapped_column(Boolean, default=True)


class MediaAttachmentModel(Base):
    """Audit record of an uploaded asset."""

    __tablename__ = "election_images"
    __table_args__ = (
        CheckConstraint(
            "image_type IN ('topic', 'logo', 'question', 'answer')",
            name="ck_election_images_image_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    election_id: Mapped[int] = mapped_column(
        ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_type: Mapped[str] = mapped_column(String(16), nullable=False)
    storage_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    original_filename: Mapped[str | None] = mapped_column(String(255))
    reference_id: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

"""Domain entities."""

from src.domain.entities.answer import Answer
from src.domain.entities.base import BaseEntity
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


__all__ = [
    "Answer",
    "AuthMethod",
    "BaseEntity",
    "Election",
    "MediaAttachment",
    "MediaSlot",
    "PermissionToVote",
    "PricingType",
    "Question",
    "QuestionType",
    "RewardConfiguration",
    "RewardType",
    "VotingType",
]

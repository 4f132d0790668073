"""Reward (lottery) configuration entity."""

from decimal import Decimal
from enum import Enum

from src.domain.entities.base import BaseEntity


class RewardType(str, Enum):
    """Kinds of lottery reward."""

    MONETARY = "monetary"
    NON_MONETARY = "non_monetary"


class RewardConfiguration(BaseEntity):
    """Lottery configuration attached to at most one election.

    A monetary reward never carries a description; a non-monetary reward
    always does, falling back to a placeholder.
    """

    PLACEHOLDER_DESCRIPTION = "To be determined"

    def __init__(
        self,
        reward_type: RewardType,
        reward_amount: Decimal = Decimal("0"),
        non_monetary_reward: str | None = None,
        winner_count: int = 1,
        is_lotterized: bool = True,
        lottery_active: bool = True,
        election_id: int | None = None,
        id: int | None = None,
    ) -> None:
        super().__init__(id)
        self.election_id = election_id
        self.is_lotterized = is_lotterized
        self.reward_type = reward_type
        self.reward_amount = reward_amount
        self.non_monetary_reward = non_monetary_reward
        self.winner_count = winner_count
        self.lottery_active = lottery_active

    @classmethod
    def normalized(
        cls,
        reward_type: RewardType,
        reward_amount: Decimal = Decimal("0"),
        non_monetary_reward: str | None = None,
        winner_count: int = 1,
        election_id: int | None = None,
    ) -> "RewardConfiguration":
        """Build an enabled, active configuration applying the description rule.

        Args:
            reward_type: Reward kind
            reward_amount: Monetary amount
            non_monetary_reward: Description of a non-monetary reward
            winner_count: Number of lottery winners
            election_id: Owning election ID

        Returns:
            RewardConfiguration with the description cleared or defaulted
        """
        description = non_monetary_reward
        if reward_type is RewardType.MONETARY:
            description = None
        elif not description or not description.strip():
            description = cls.PLACEHOLDER_DESCRIPTION

        return cls(
            election_id=election_id,
            reward_type=reward_type,
            reward_amount=reward_amount,
            non_monetary_reward=description,
            winner_count=winner_count,
            is_lotterized=True,
            lottery_active=True,
        )

    def __str__(self) -> str:
        if self.reward_type is RewardType.MONETARY:
            return f"{self.reward_amount} x{self.winner_count}"
        return f"{self.non_monetary_reward} x{self.winner_count}"

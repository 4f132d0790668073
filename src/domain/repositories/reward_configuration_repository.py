"""Reward configuration repository interface."""

from src.domain.entities.reward_configuration import RewardConfiguration
from src.domain.repositories.base import BaseRepository


class RewardConfigurationRepository(BaseRepository[RewardConfiguration]):
    """Repository interface for the 0..1 reward row of an election."""

"""Reward configuration repository implementation using SQLAlchemy."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.reward_configuration import RewardConfiguration
from src.domain.repositories.reward_configuration_repository import (
    RewardConfigurationRepository,
)
from src.infrastructure.persistence.base_repository_impl import BaseRepositoryImpl
from src.infrastructure.persistence.model_mappers import (
    reward_to_entity,
    reward_to_model,
)
from src.infrastructure.persistence.sqlalchemy_models import RewardConfigurationModel


class RewardConfigurationRepositoryImpl(
    BaseRepositoryImpl[RewardConfiguration], RewardConfigurationRepository
):
    """Reward configuration repository implementation using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            entity_class=RewardConfiguration,
            model_class=RewardConfigurationModel,
        )

    def _to_entity(self, model: RewardConfigurationModel) -> RewardConfiguration:
        return reward_to_entity(model)

    def _to_model(self, entity: RewardConfiguration) -> RewardConfigurationModel:
        return reward_to_model(entity)

"""Election aggregate reader using SQLAlchemy."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.election import Election
from src.domain.entities.question import Question
from src.domain.repositories.election_aggregate_repository import (
    ElectionAggregateRepository,
)
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.model_mappers import (
    answer_to_entity,
    election_to_entity,
    question_to_entity,
    reward_to_entity,
)
from src.infrastructure.persistence.sqlalchemy_models import (
    AnswerModel,
    ElectionModel,
    QuestionModel,
    RewardConfigurationModel,
)


logger = logging.getLogger(__name__)


class ElectionAggregateRepositoryImpl(ElectionAggregateRepository):
    """Reads an election and everything it owns in two queries.

    The first query left-joins the election with its reward row, the
    second left-joins questions with their answers ordered by position.
    Rows of the second query are folded into questions keyed by question
    id, so a question without answers still appears with an empty list.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_aggregate(self, election_id: int) -> Election | None:
        """Load an election with its reward, questions and answers.

        Args:
            election_id: Election ID

        Returns:
            Election aggregate, or None if no election has that ID
        """
        election_query = (
            select(ElectionModel, RewardConfigurationModel)
            .outerjoin(
                RewardConfigurationModel,
                RewardConfigurationModel.election_id == ElectionModel.id,
            )
            .where(ElectionModel.id == election_id)
            .execution_options(populate_existing=True)
        )
        questions_query = (
            select(QuestionModel, AnswerModel)
            .outerjoin(AnswerModel, AnswerModel.question_id == QuestionModel.id)
            .where(QuestionModel.election_id == election_id)
            .order_by(
                QuestionModel.question_order,
                AnswerModel.answer_order,
                AnswerModel.id,
            )
            .execution_options(populate_existing=True)
        )

        try:
            election_row = (await self.session.execute(election_query)).first()
            if election_row is None:
                return None
            question_rows = (await self.session.execute(questions_query)).all()
        except SQLAlchemyError as e:
            logger.error(f"Database error reading election aggregate: {e}")
            raise DatabaseError(
                "Failed to read election aggregate",
                {"election_id": election_id, "error": str(e)},
            ) from e

        election_model, reward_model = election_row
        election = election_to_entity(election_model)
        if reward_model is not None:
            election.reward = reward_to_entity(reward_model)

        questions: dict[int, Question] = {}
        for question_model, answer_model in question_rows:
            question = questions.get(question_model.id)
            if question is None:
                question = question_to_entity(question_model)
                questions[question_model.id] = question
            if answer_model is not None:
                question.answers.append(answer_to_entity(answer_model))

        election.questions = list(questions.values())
        return election

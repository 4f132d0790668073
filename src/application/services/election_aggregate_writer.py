"""Writes the mandatory part of an election aggregate."""

from dataclasses import dataclass, field

from src.application.dtos.election_dto import CreateElectionInputDto
from src.common.logging import get_logger
from src.domain.entities.answer import Answer
from src.domain.entities.question import Question
from src.domain.services.interfaces.unit_of_work import IUnitOfWork


logger = get_logger(__name__)


@dataclass
class WrittenAggregate:
    """IDs generated while writing, used to attach media afterwards.

    Question and answer IDs are keyed by the caller's correlation id; rows
    without one are not addressable by media and are left out.
    """

    election_id: int
    question_ids: dict[str, int] = field(default_factory=dict)
    answer_ids: dict[str, int] = field(default_factory=dict)
    question_count: int = 0
    answer_count: int = 0


class ElectionAggregateWriter:
    """Inserts the election, its questions and their answers.

    Runs entirely inside the caller's unit of work and does no network I/O.
    Any failure propagates so the caller rolls back the whole aggregate.
    """

    async def write(
        self, uow: IUnitOfWork, input_dto: CreateElectionInputDto
    ) -> WrittenAggregate:
        """Write the parent row, then every child row in caller order.

        Args:
            uow: Open unit of work
            input_dto: Validated creation request

        Returns:
            WrittenAggregate with the generated IDs

        Raises:
            ConstraintViolationException: If any row violates a constraint
            DatabaseError: On any other database failure
        """
        election = await uow.elections.create(input_dto.to_entity())
        if election.id is None:
            raise RuntimeError("Election insert did not return an ID")

        written = WrittenAggregate(election_id=election.id)
        logger.debug(f"Election row {election.id} written", election_id=election.id)

        for position, question_input in enumerate(input_dto.questions, start=1):
            question = await uow.questions.create(
                Question(
                    election_id=election.id,
                    question_text=question_input.text,
                    question_type=question_input.question_type,
                    question_order=position,
                    is_required=question_input.is_required,
                    allow_other_option=question_input.allow_other_option,
                    character_limit=question_input.character_limit,
                    question_external_id=question_input.external_id,
                )
            )
            assert question.id is not None
            written.question_count += 1
            if question_input.external_id:
                written.question_ids[question_input.external_id] = question.id

            for answer_position, answer_input in enumerate(
                question_input.answers, start=1
            ):
                answer = await uow.answers.create(
                    Answer(
                        question_id=question.id,
                        answer_text=answer_input.text,
                        answer_order=answer_position,
                        answer_external_id=answer_input.external_id,
                    )
                )
                assert answer.id is not None
                written.answer_count += 1
                if answer_input.external_id:
                    written.answer_ids[answer_input.external_id] = answer.id

        logger.info(
            "Election aggregate written",
            election_id=election.id,
            questions=written.question_count,
            answers=written.answer_count,
        )
        return written

"""Question entity."""

from enum import Enum

from src.domain.entities.answer import Answer
from src.domain.entities.base import BaseEntity


class QuestionType(str, Enum):
    """Closed set of question types."""

    MULTIPLE_CHOICE = "multiple_choice"
    OPEN_TEXT = "open_text"
    IMAGE_BASED = "image_based"
    COMPARISON = "comparison"

    @property
    def requires_answers(self) -> bool:
        """Choice-style questions need answer options; open text does not."""
        return self is not QuestionType.OPEN_TEXT


class Question(BaseEntity):
    """A question of an election, ordered among its siblings."""

    DEFAULT_CHARACTER_LIMIT = 5000

    def __init__(
        self,
        question_text: str,
        question_order: int,
        question_type: QuestionType = QuestionType.MULTIPLE_CHOICE,
        election_id: int | None = None,
        is_required: bool = True,
        allow_other_option: bool = False,
        character_limit: int = DEFAULT_CHARACTER_LIMIT,
        question_external_id: str | None = None,
        question_image_url: str | None = None,
        answers: list[Answer] | None = None,
        id: int | None = None,
    ) -> None:
        """Initialize a question.

        Args:
            question_text: Question text
            question_order: 1-based position within the election
            question_type: Question type
            election_id: Owning election ID
            is_required: Whether voters must answer
            allow_other_option: Whether a free-text "other" answer is allowed
            character_limit: Maximum length of free-text answers
            question_external_id: Caller-supplied correlation id
            question_image_url: URL of the attached image
            answers: Answers in position order
            id: Question ID
        """
        super().__init__(id)
        self.election_id = election_id
        self.question_text = question_text
        self.question_type = question_type
        self.question_order = question_order
        self.is_required = is_required
        self.allow_other_option = allow_other_option
        self.character_limit = character_limit
        self.question_external_id = question_external_id
        self.question_image_url = question_image_url
        self.answers: list[Answer] = answers if answers is not None else []

    def __str__(self) -> str:
        return f"Q{self.question_order}: {self.question_text}"

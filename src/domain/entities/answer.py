"""Answer entity."""

from src.domain.entities.base import BaseEntity


class Answer(BaseEntity):
    """One answer option of a question, ordered among its siblings."""

    def __init__(
        self,
        answer_text: str,
        answer_order: int,
        question_id: int | None = None,
        answer_external_id: str | None = None,
        answer_image_url: str | None = None,
        id: int | None = None,
    ) -> None:
        """Initialize an answer.

        Args:
            answer_text: Answer text shown to voters
            answer_order: 1-based position within the question
            question_id: Owning question ID
            answer_external_id: Caller-supplied correlation id
            answer_image_url: URL of the attached image
            id: Answer ID
        """
        super().__init__(id)
        self.question_id = question_id
        self.answer_text = answer_text
        self.answer_order = answer_order
        self.answer_external_id = answer_external_id
        self.answer_image_url = answer_image_url

    def __str__(self) -> str:
        return f"{self.answer_order}. {self.answer_text}"

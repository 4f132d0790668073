"""Media attachment audit entity."""

from datetime import datetime
from enum import Enum

from src.domain.entities.base import BaseEntity


class MediaSlot(str, Enum):
    """Logical slot an uploaded asset fills."""

    TOPIC = "topic"
    LOGO = "logo"
    QUESTION = "question"
    ANSWER = "answer"


class MediaAttachment(BaseEntity):
    """Provenance record for one stored asset of an election.

    ``reference_id`` points at the owning question or answer row for
    question/answer images and is None for topic and logo images.
    """

    def __init__(
        self,
        election_id: int,
        image_type: MediaSlot,
        storage_id: str,
        url: str,
        original_filename: str | None = None,
        reference_id: int | None = None,
        created_at: datetime | None = None,
        id: int | None = None,
    ) -> None:
        super().__init__(id)
        self.election_id = election_id
        self.image_type = image_type
        self.storage_id = storage_id
        self.url = url
        self.original_filename = original_filename
        self.reference_id = reference_id
        self.created_at = created_at

    def __str__(self) -> str:
        return f"{self.image_type.value}:{self.storage_id}"

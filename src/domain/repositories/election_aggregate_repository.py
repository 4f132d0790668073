"""Election aggregate read interface."""

from abc import ABC, abstractmethod

from src.domain.entities.election import Election


class ElectionAggregateRepository(ABC):
    """Reads a whole election aggregate as one nested object graph."""

    @abstractmethod
    async def get_aggregate(self, election_id: int) -> Election | None:
        """Load an election with its reward, questions and answers.

        Args:
            election_id: Election ID

        Returns:
            Election with ``questions`` (each with ``answers``) in stored
            position order and ``reward`` set when configured, or None if
            no election has that ID
        """
        pass

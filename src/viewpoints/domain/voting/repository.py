"""
Voting Domain Repository Interfaces

Abstract base classes defining the contracts for response persistence.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.value_objects import VoterIdentity


class ResponseRepository(ABC):
    """Abstract repository for recorded reactions.

    Uniqueness per (statement, voter) is not enforced here; callers only
    send one reaction per presented statement.
    """

    @abstractmethod
    async def insert(self, reaction: Reaction) -> Reaction:
        """Store a reaction.

        Args:
            reaction: The reaction to store.

        Returns:
            The stored reaction, carrying its ID.
        """
        ...

    @abstractmethod
    async def list_for_poll(
        self, poll_id: int, voter: VoterIdentity | None = None
    ) -> list[Reaction]:
        """List responses to a poll's statements.

        Args:
            poll_id: The poll ID.
            voter: Restrict to this voter's responses; all responses when None.

        Returns:
            Responses ordered by ID.
        """
        ...

    @abstractmethod
    async def answered_statement_ids(self, poll_id: int, voter: VoterIdentity) -> set[int]:
        """IDs of the poll's statements this voter has already reacted to."""
        ...

    @abstractmethod
    async def respondent_keys(
        self, poll_ids: Iterable[int]
    ) -> list[tuple[int, str | None, str | None]]:
        """Distinct ``(poll_id, user_id, session_id)`` triples among the polls' responses."""
        ...

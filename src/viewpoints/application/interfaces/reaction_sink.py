"""Port interface for durably recording reactions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.voting.entities import Reaction


class ReactionSink(ABC):
    """Interface for the persistence write issued once per reaction."""

    @abstractmethod
    async def insert(self, reaction: Reaction) -> Reaction:
        """Store a reaction, raising on any store or network error."""
        ...

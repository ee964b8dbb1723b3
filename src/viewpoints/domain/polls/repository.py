"""
Polls Domain Repository Interfaces

Abstract base classes defining the contracts for poll, statement and author persistence.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from viewpoints.domain.polls.entities import Author, Poll, Statement


class PollRepository(ABC):
    """Abstract repository for polls."""

    @abstractmethod
    async def get(self, poll_id: int) -> Poll | None:
        """Retrieve a poll by its ID.

        Args:
            poll_id: The poll ID.

        Returns:
            The poll if found, None otherwise.
        """
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Poll | None:
        """Retrieve a poll by its URL slug."""
        ...

    @abstractmethod
    async def get_by_polis_id(self, polis_id: str) -> Poll | None:
        """Retrieve a poll by the external id used when embedding it."""
        ...

    @abstractmethod
    async def save(self, poll: Poll) -> Poll:
        """Insert or update a poll.

        Args:
            poll: The poll to save. Polls without an ID are inserted.

        Returns:
            The saved poll, carrying its ID.
        """
        ...

    @abstractmethod
    async def list_public(self) -> list[Poll]:
        """List public polls, newest (highest ID) first."""
        ...


class StatementRepository(ABC):
    """Abstract repository for statements."""

    @abstractmethod
    async def get(self, statement_id: int) -> Statement | None:
        """Retrieve a statement by its ID."""
        ...

    @abstractmethod
    async def list_for_poll(self, poll_id: int) -> list[Statement]:
        """List a poll's statements, oldest first.

        Args:
            poll_id: The poll ID.

        Returns:
            Statements ordered by creation time ascending.
        """
        ...

    @abstractmethod
    async def add(self, statement: Statement) -> Statement:
        """Insert a new statement.

        Returns:
            The stored statement, carrying its ID.
        """
        ...

    @abstractmethod
    async def delete(self, statement_id: int) -> int:
        """Delete a statement together with its responses.

        Returns:
            Number of responses removed alongside the statement.
        """
        ...

    @abstractmethod
    async def count_by_poll(self, poll_ids: Iterable[int]) -> dict[int, int]:
        """Count statements per poll.

        Returns:
            Mapping of poll ID to statement count; polls without statements are absent.
        """
        ...


class AuthorRepository(ABC):
    """Abstract repository for poll author profiles."""

    @abstractmethod
    async def get_many(self, user_ids: Iterable[str]) -> dict[str, Author]:
        """Fetch authors keyed by user ID. Unknown IDs are absent from the result."""
        ...

    @abstractmethod
    async def save(self, author: Author) -> None:
        """Insert or replace an author profile."""
        ...

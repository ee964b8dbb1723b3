"""Core domain entities for the voting bounded context."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from viewpoints.domain.polls.entities import Statement
from viewpoints.domain.shared.datetime_utils import utcnow
from viewpoints.domain.shared.exceptions import InvalidOperationError, ValidationError
from viewpoints.domain.shared.messages import ErrorMessages
from viewpoints.domain.shared.types import EntityId, UtcDatetimeField
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity, VotingState


class Reaction(BaseModel):
    """A recorded valence from one voter for one statement (a "response")."""

    model_config = ConfigDict(frozen=True)

    id: EntityId | None = None
    statement_id: EntityId
    voter: VoterIdentity
    valence: Valence
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    def to_payload(self) -> dict[str, Any]:
        """The insert payload: statement, the voter's identity column, valence."""
        return {
            "statement_id": self.statement_id,
            self.voter.field_name: self.voter.value,
            "valence": self.valence.value,
        }

    def with_id(self, reaction_id: int) -> Reaction:
        return self.model_copy(update={"id": reaction_id})


class VotingQueue:
    """Ordered, session-local sequence of statements not yet reacted to.

    The active statement is the last element (the top of the visual stack).
    Statements only ever leave the queue; it is never reordered.
    """

    def __init__(self, statements: Iterable[Statement] = ()) -> None:
        self._items: list[Statement] = []
        for statement in statements:
            self.append(statement)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Statement]:
        return iter(tuple(self._items))

    def __contains__(self, statement: object) -> bool:
        if not isinstance(statement, Statement):
            return False
        return any(s.id == statement.id for s in self._items)

    @property
    def active(self) -> Statement | None:
        return self._items[-1] if self._items else None

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def state(self) -> VotingState:
        return VotingState.EXHAUSTED if self.is_empty else VotingState.HAS_STATEMENTS

    @property
    def statements(self) -> tuple[Statement, ...]:
        return tuple(self._items)

    def remove_active(self, statement: Statement) -> Statement:
        """Remove the active statement.

        Raises:
            InvalidOperationError: If the queue is empty or the statement is not active.
        """
        active = self.active
        if active is None:
            raise InvalidOperationError(
                "react", self.state.value, message=ErrorMessages.QUEUE_EXHAUSTED
            )
        if active.id != statement.id:
            raise InvalidOperationError(
                "react",
                self.state.value,
                message=ErrorMessages.NOT_ACTIVE_STATEMENT.format(statement_id=statement.id),
            )
        return self._items.pop()

    def append(self, statement: Statement) -> None:
        """Put a statement on top of the stack, making it active."""
        if statement.id is None:
            raise ValidationError(ErrorMessages.UNSAVED_STATEMENT, field="id")
        if statement in self:
            raise InvalidOperationError(
                "append",
                self.state.value,
                message=ErrorMessages.DUPLICATE_STATEMENT.format(statement_id=statement.id),
            )
        self._items.append(statement)

    def discard(self, statement_id: int) -> bool:
        """Drop a statement wherever it sits. Returns whether it was queued."""
        for index, queued in enumerate(self._items):
            if queued.id == statement_id:
                del self._items[index]
                return True
        return False

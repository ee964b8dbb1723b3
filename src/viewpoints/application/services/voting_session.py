"""Voting session controller - presents statements one at a time and records reactions.

The queue advances optimistically: a reacted-to statement leaves the queue
before its write completes. Writes run as background tasks; failed writes
are kept in a retry buffer instead of being lost.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ...domain.shared.events import ReactionIssued, ReactionWriteFailed, VotingQueueExhausted
from ...domain.shared.exceptions import MissingVoterIdentityError
from ...domain.shared.messages import LogTemplates
from ...domain.voting.entities import Reaction, VotingQueue
from ...domain.voting.value_objects import Valence, VoterIdentity, VotingState

if TYPE_CHECKING:
    from ...domain.polls.entities import Statement
    from ...domain.shared.events import DomainEvent, EventBus
    from ..interfaces.reaction_sink import ReactionSink

logger = logging.getLogger(__name__)


class VotingSessionController:
    """Holds one voter's queue of statements and records their reactions.

    Each ``react`` issues exactly one write and removes the statement from
    the queue before any await, whatever the write's outcome.
    """

    def __init__(
        self,
        statements: Iterable[Statement],
        identity: VoterIdentity | None,
        sink: ReactionSink,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        if identity is None:
            raise MissingVoterIdentityError()
        self._queue = VotingQueue(statements)
        self._identity = identity
        self._sink = sink
        self._bus = event_bus
        self._pending: dict[asyncio.Task[Reaction], Reaction] = {}
        self._failed: list[Reaction] = []
        self._background: set[asyncio.Task[None]] = set()
        self._write_attempts = 0
        self._forgotten: set[int] = set()

    # === Observable state ===

    @property
    def identity(self) -> VoterIdentity:
        return self._identity

    @property
    def active_statement(self) -> Statement | None:
        return self._queue.active

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self._queue.statements

    @property
    def remaining(self) -> int:
        return len(self._queue)

    @property
    def is_exhausted(self) -> bool:
        return self._queue.is_empty

    @property
    def state(self) -> VotingState:
        return self._queue.state

    @property
    def pending_reactions(self) -> tuple[Reaction, ...]:
        """Reactions whose write has been issued but has not completed."""
        return tuple(self._pending.values())

    @property
    def failed_reactions(self) -> tuple[Reaction, ...]:
        """Reactions whose write failed and has not been retried yet."""
        return tuple(self._failed)

    @property
    def write_attempts(self) -> int:
        return self._write_attempts

    @property
    def is_settled(self) -> bool:
        """No writes in flight and nothing waiting for a retry."""
        return not (self._pending or self._failed or self._background)

    # === Operations ===

    async def react(self, statement: Statement, valence: Valence | str) -> Reaction:
        """Record the voter's reaction to the active statement and advance the queue.

        Args:
            statement: Must be the active (topmost) statement.
            valence: agree, disagree or skip.

        Returns:
            The reaction whose write was issued.

        Raises:
            ValidationError: If the valence is unknown.
            InvalidOperationError: If the statement is not the active one.
        """
        valence = Valence.parse(valence)
        self._queue.remove_active(statement)

        reaction = Reaction(statement_id=statement.id, voter=self._identity, valence=valence)
        self._issue(reaction)

        remaining = len(self._queue)
        logger.debug(
            LogTemplates.VOTING_REACTION_ISSUED,
            valence.value,
            statement.id,
            self._identity,
            remaining,
        )

        await self._publish(
            ReactionIssued(
                statement_id=reaction.statement_id,
                voter=self._identity.key,
                valence=valence.value,
                remaining=remaining,
            )
        )

        if remaining == 0:
            logger.info(LogTemplates.VOTING_QUEUE_EXHAUSTED, self._identity)
            await self._publish(
                VotingQueueExhausted(voter=self._identity.key, last_statement_id=statement.id)
            )

        return reaction

    def append(self, statement: Statement) -> None:
        """Add a statement from outside, e.g. one the voter just contributed."""
        self._queue.append(statement)
        logger.debug(LogTemplates.VOTING_STATEMENT_APPENDED, statement.id, self._identity)

    def forget_statement(self, statement_id: int) -> bool:
        """Drop a deleted statement from the queue and the retry buffer.

        A write still in flight for it is dropped, not buffered, if it fails.

        Returns:
            True if the queue or the retry buffer held the statement.
        """
        self._forgotten.add(statement_id)
        buffered = len(self._failed)
        self._failed = [r for r in self._failed if r.statement_id != statement_id]
        removed = self._queue.discard(statement_id) or buffered != len(self._failed)
        if removed:
            logger.debug(LogTemplates.VOTING_STATEMENT_FORGOTTEN, statement_id, self._identity)
        return removed

    async def retry_failed(self) -> int:
        """Re-issue one write for every reaction in the retry buffer.

        Returns:
            Number of writes re-issued.
        """
        failed, self._failed = self._failed, []
        if failed:
            logger.info(LogTemplates.VOTING_RETRYING, len(failed), self._identity)
        for reaction in failed:
            self._issue(reaction)
        return len(failed)

    async def drain(self) -> None:
        """Wait until every issued write and failure notification has settled."""
        while self._pending or self._background:
            await asyncio.gather(
                *list(self._pending), *list(self._background), return_exceptions=True
            )

    # === Internals ===

    def _issue(self, reaction: Reaction) -> None:
        task = asyncio.create_task(self._sink.insert(reaction))
        self._write_attempts += 1
        self._pending[task] = reaction
        task.add_done_callback(self._on_write_done)

    def _on_write_done(self, task: asyncio.Task[Reaction]) -> None:
        reaction = self._pending.pop(task)
        if task.cancelled():
            error: BaseException = asyncio.CancelledError()
        else:
            exc = task.exception()
            if exc is None:
                return
            error = exc

        if reaction.statement_id in self._forgotten:
            logger.debug(
                LogTemplates.VOTING_WRITE_DROPPED, reaction.statement_id, self._identity, error
            )
            return

        self._failed.append(reaction)
        logger.warning(
            LogTemplates.VOTING_WRITE_FAILED,
            reaction.valence.value,
            reaction.statement_id,
            self._identity,
            error,
        )

        if self._bus is not None:
            notify = asyncio.ensure_future(
                self._publish(
                    ReactionWriteFailed(
                        statement_id=reaction.statement_id,
                        voter=self._identity.key,
                        valence=reaction.valence.value,
                        error=repr(error),
                    )
                )
            )
            self._background.add(notify)
            notify.add_done_callback(self._background.discard)

    async def _publish(self, event: DomainEvent) -> None:
        if self._bus is not None:
            await self._bus.publish(event)

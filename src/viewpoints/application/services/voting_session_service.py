"""Voting Session Service - supplies queues and keeps one controller per voter and poll."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict, defaultdict
from typing import TYPE_CHECKING

from ...domain.polls.services import PollAccessPolicy
from ...domain.shared.messages import LogTemplates
from .voting_session import VotingSessionController

if TYPE_CHECKING:
    from ...domain.polls.repository import PollRepository, StatementRepository
    from ...domain.shared.events import EventBus
    from ...domain.voting.repository import ResponseRepository
    from ...domain.voting.value_objects import VoterIdentity
    from ..interfaces.reaction_sink import ReactionSink

logger = logging.getLogger(__name__)

SessionKey = tuple[int, str]

DEFAULT_MAX_SESSIONS = 10_000


class VotingSessionService:
    """Starts voting sessions from a poll's statements and keeps them in memory.

    At most ``max_sessions`` sessions are held. Past that, the least recently
    used sessions with no writes in flight or waiting for a retry are evicted.
    """

    def __init__(
        self,
        *,
        poll_repository: PollRepository,
        statement_repository: StatementRepository,
        response_repository: ResponseRepository,
        sink: ReactionSink,
        event_bus: EventBus | None = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._poll_repo = poll_repository
        self._statement_repo = statement_repository
        self._response_repo = response_repository
        self._sink = sink
        self._bus = event_bus
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[SessionKey, VotingSessionController] = OrderedDict()
        self._locks: dict[SessionKey, asyncio.Lock] = defaultdict(asyncio.Lock)

    @staticmethod
    def _key(poll_id: int, identity: VoterIdentity) -> SessionKey:
        return (poll_id, identity.key)

    @property
    def active_session_count(self) -> int:
        return len(self._sessions)

    async def start(self, poll_id: int, identity: VoterIdentity) -> VotingSessionController:
        """Start a fresh session, replacing any existing one for this voter and poll.

        The queue holds the poll's statements the voter has not reacted to,
        oldest first, so the newest statement is presented first.

        Raises:
            EntityNotFoundError: If the poll does not exist.
        """
        PollAccessPolicy.require_poll(await self._poll_repo.get(poll_id), poll_id)

        statements = await self._statement_repo.list_for_poll(poll_id)
        answered = await self._response_repo.answered_statement_ids(poll_id, identity)
        queue = [s for s in statements if s.id not in answered]

        controller = VotingSessionController(queue, identity, self._sink, event_bus=self._bus)
        key = self._key(poll_id, identity)
        self._sessions[key] = controller
        self._sessions.move_to_end(key)
        self._evict_idle(keep=key)

        logger.info(LogTemplates.VOTING_SESSION_STARTED, identity, poll_id, len(queue))
        return controller

    async def get_or_start(
        self, poll_id: int, identity: VoterIdentity
    ) -> VotingSessionController:
        """Return the voter's live session, starting a new one when needed.

        An exhausted session whose writes have all landed is replaced, so a
        returning voter sees statements added since it ran out.
        """
        key = self._key(poll_id, identity)
        try:
            async with self._locks[key]:
                existing = self._sessions.get(key)
                if existing is not None and not (existing.is_exhausted and existing.is_settled):
                    self._sessions.move_to_end(key)
                    return existing
                return await self.start(poll_id, identity)
        finally:
            if key not in self._sessions:
                self._locks.pop(key, None)

    def get(self, poll_id: int, identity: VoterIdentity) -> VotingSessionController | None:
        return self._sessions.get(self._key(poll_id, identity))

    async def discard(self, poll_id: int, identity: VoterIdentity) -> bool:
        """Drop a voter's session after its in-flight writes settle."""
        controller = self._sessions.pop(self._key(poll_id, identity), None)
        self._locks.pop(self._key(poll_id, identity), None)
        if controller is None:
            return False
        await controller.drain()
        logger.info(LogTemplates.VOTING_SESSION_DISCARDED, identity, poll_id)
        return True

    def forget_statement(self, statement_id: int) -> int:
        """Remove a deleted statement from every live session.

        Returns:
            Number of sessions that held it.
        """
        affected = sum(
            1 for controller in self._sessions.values() if controller.forget_statement(statement_id)
        )
        if affected:
            logger.info(LogTemplates.VOTING_SESSIONS_FORGOT_STATEMENT, statement_id, affected)
        return affected

    def _evict_idle(self, *, keep: SessionKey) -> None:
        excess = len(self._sessions) - self._max_sessions
        if excess <= 0:
            return
        idle = [
            key
            for key, controller in self._sessions.items()
            if key != keep and controller.is_settled
        ][:excess]
        for key in idle:
            controller = self._sessions.pop(key)
            self._locks.pop(key, None)
            logger.debug(LogTemplates.VOTING_SESSION_EVICTED, controller.identity, key[0])

    async def shutdown(self) -> None:
        """Wait for all in-flight writes, then forget every session."""
        controllers = list(self._sessions.values())
        await asyncio.gather(*(c.drain() for c in controllers))
        self._sessions.clear()
        self._locks.clear()

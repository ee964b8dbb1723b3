"""Command and handler for contributing a new statement to a poll."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from viewpoints.domain.polls.entities import Statement
from viewpoints.domain.polls.services import PollAccessPolicy
from viewpoints.domain.shared.events import StatementCreated
from viewpoints.domain.shared.messages import LogTemplates
from viewpoints.domain.shared.types import EntityId, StatementText
from viewpoints.domain.voting.value_objects import VoterIdentity

if TYPE_CHECKING:
    from ...domain.polls.repository import PollRepository, StatementRepository
    from ...domain.shared.events import EventBus
    from ..services.voting_session_service import VotingSessionService

logger = logging.getLogger(__name__)


class CreateStatementCommand(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    poll_id: EntityId
    text: StatementText
    author: VoterIdentity


class CreateStatementHandler:
    """Stores a new statement and queues it in the author's open voting session.

    This is the path taken when an exhausted session invites the voter to
    add a statement of their own.
    """

    def __init__(
        self,
        *,
        poll_repository: PollRepository,
        statement_repository: StatementRepository,
        voting_sessions: VotingSessionService | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._poll_repo = poll_repository
        self._statement_repo = statement_repository
        self._voting_sessions = voting_sessions
        self._bus = event_bus

    async def handle(self, command: CreateStatementCommand) -> Statement:
        poll = PollAccessPolicy.require_poll(
            await self._poll_repo.get(command.poll_id), command.poll_id
        )

        statement = await self._statement_repo.add(
            Statement(
                poll_id=command.poll_id,
                text=command.text,
                user_id=command.author.user_id,
                session_id=command.author.session_id,
            )
        )
        logger.info(LogTemplates.STATEMENT_CREATED, statement.id, poll.id)

        if self._voting_sessions is not None:
            session = self._voting_sessions.get(command.poll_id, command.author)
            if session is not None:
                session.append(statement)

        if self._bus is not None:
            await self._bus.publish(
                StatementCreated(poll_id=command.poll_id, statement_id=statement.id)
            )

        return statement

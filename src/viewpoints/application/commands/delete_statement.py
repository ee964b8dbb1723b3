"""Command and handler for removing a statement from a poll."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from viewpoints.domain.polls.services import PollAccessPolicy
from viewpoints.domain.shared.events import StatementDeleted
from viewpoints.domain.shared.exceptions import EntityNotFoundError
from viewpoints.domain.shared.messages import LogTemplates
from viewpoints.domain.shared.types import EntityId, NonNegativeInt

if TYPE_CHECKING:
    from ...domain.polls.repository import PollRepository, StatementRepository
    from ...domain.shared.events import EventBus
    from ..services.voting_session_service import VotingSessionService

logger = logging.getLogger(__name__)


class DeleteStatementCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement_id: EntityId
    user_id: str | None = None


class DeleteStatementResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement_id: EntityId
    poll_id: EntityId
    responses_deleted: NonNegativeInt = 0


class DeleteStatementHandler:
    """Only the poll admin may delete a statement; its responses go with it.

    Live voting sessions drop the statement too, so nobody is left reacting
    to a card that no longer exists.
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

    async def handle(self, command: DeleteStatementCommand) -> DeleteStatementResult:
        statement = await self._statement_repo.get(command.statement_id)
        if statement is None:
            raise EntityNotFoundError("Statement", command.statement_id)

        poll = await self._poll_repo.get(statement.poll_id)
        PollAccessPolicy.require_poll_admin(poll, command.user_id)

        responses_deleted = await self._statement_repo.delete(command.statement_id)
        logger.info(
            LogTemplates.STATEMENT_DELETED,
            command.statement_id,
            statement.poll_id,
            responses_deleted,
        )

        if self._voting_sessions is not None:
            self._voting_sessions.forget_statement(command.statement_id)

        if self._bus is not None:
            await self._bus.publish(
                StatementDeleted(
                    poll_id=statement.poll_id,
                    statement_id=command.statement_id,
                    deleted_by=command.user_id or "",
                )
            )

        return DeleteStatementResult(
            statement_id=command.statement_id,
            poll_id=statement.poll_id,
            responses_deleted=responses_deleted,
        )

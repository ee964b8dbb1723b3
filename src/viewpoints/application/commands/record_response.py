"""Command and handler for recording a single response outside a voting session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from viewpoints.domain.shared.exceptions import EntityNotFoundError
from viewpoints.domain.shared.messages import LogTemplates
from viewpoints.domain.shared.types import EntityId
from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity

if TYPE_CHECKING:
    from ...domain.polls.repository import StatementRepository
    from ..interfaces.reaction_sink import ReactionSink

logger = logging.getLogger(__name__)


class RecordResponseCommand(BaseModel):
    """Record one voter's reaction to one statement."""

    model_config = ConfigDict(frozen=True)

    statement_id: EntityId
    valence: Valence
    voter: VoterIdentity
    poll_id: EntityId | None = None

    @field_validator("valence", mode="before")
    @classmethod
    def _parse_valence(cls, v: object) -> Valence:
        return Valence.parse(v)  # type: ignore[arg-type]


class RecordResponseHandler:

    def __init__(
        self,
        *,
        statement_repository: StatementRepository,
        sink: ReactionSink,
    ) -> None:
        self._statement_repo = statement_repository
        self._sink = sink

    async def handle(self, command: RecordResponseCommand) -> Reaction:
        statement = await self._statement_repo.get(command.statement_id)
        if statement is None or (
            command.poll_id is not None and statement.poll_id != command.poll_id
        ):
            raise EntityNotFoundError("Statement", command.statement_id)

        reaction = await self._sink.insert(
            Reaction(
                statement_id=command.statement_id,
                voter=command.voter,
                valence=command.valence,
            )
        )
        logger.info(
            LogTemplates.RESPONSE_INSERTED,
            command.valence.value,
            command.statement_id,
            command.voter,
        )
        return reaction

"""Query for a poll embedded in a third-party page by its external id."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from viewpoints.domain.polls.entities import Poll, Statement
from viewpoints.domain.shared.exceptions import EntityNotFoundError
from viewpoints.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.polls.repository import PollRepository, StatementRepository


class GetEmbeddedPollQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    polis_id: NonEmptyStr


class EmbeddedPoll(BaseModel):

    poll: Poll
    statements: list[Statement] = Field(default_factory=list)


class GetEmbeddedPollHandler:

    def __init__(
        self,
        *,
        poll_repository: PollRepository,
        statement_repository: StatementRepository,
    ) -> None:
        self._poll_repo = poll_repository
        self._statement_repo = statement_repository

    async def handle(self, query: GetEmbeddedPollQuery) -> EmbeddedPoll:
        poll = await self._poll_repo.get_by_polis_id(query.polis_id)
        if poll is None or poll.id is None:
            raise EntityNotFoundError("Poll", query.polis_id)

        statements = await self._statement_repo.list_for_poll(poll.id)
        return EmbeddedPoll(poll=poll, statements=statements)

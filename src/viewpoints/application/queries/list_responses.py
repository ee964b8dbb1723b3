"""Query for reading a poll's responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from viewpoints.domain.polls.services import PollAccessPolicy
from viewpoints.domain.shared.messages import LogTemplates
from viewpoints.domain.shared.types import EntityId
from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.services import RespondentCounter
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity

if TYPE_CHECKING:
    from ...domain.polls.repository import PollRepository
    from ...domain.voting.repository import ResponseRepository

logger = logging.getLogger(__name__)


class ListPollResponsesQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    poll_id: EntityId
    voter: VoterIdentity | None = None
    include_all: bool = False


class PollResponses(BaseModel):

    poll_id: EntityId
    responses: list[Reaction] = Field(default_factory=list)

    @property
    def tally(self) -> dict[Valence, int]:
        return RespondentCounter.tally(self.responses)

    @property
    def is_empty(self) -> bool:
        return len(self.responses) == 0


class ListPollResponsesHandler:
    """Returns all of a poll's responses, or only the caller's own.

    Private polls only reveal responses to their admin.
    """

    def __init__(
        self,
        *,
        poll_repository: PollRepository,
        response_repository: ResponseRepository,
    ) -> None:
        self._poll_repo = poll_repository
        self._response_repo = response_repository

    async def handle(self, query: ListPollResponsesQuery) -> PollResponses:
        poll = PollAccessPolicy.require_poll(await self._poll_repo.get(query.poll_id), query.poll_id)
        user_id = query.voter.user_id if query.voter is not None else None
        PollAccessPolicy.require_poll_admin_if_private(poll, user_id)

        if query.include_all:
            responses = await self._response_repo.list_for_poll(query.poll_id)
        elif query.voter is None:
            responses = []
        else:
            responses = await self._response_repo.list_for_poll(query.poll_id, query.voter)

        logger.debug(
            LogTemplates.RESPONSES_LISTED, len(responses), query.poll_id, query.include_all
        )
        return PollResponses(poll_id=query.poll_id, responses=responses)

"""Query for the public poll index."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from viewpoints.domain.polls.entities import ANONYMOUS_AVATAR_URL, ANONYMOUS_NAME
from viewpoints.domain.shared.types import EntityId, NonNegativeInt
from viewpoints.domain.voting.services import RespondentCounter

if TYPE_CHECKING:
    from ...domain.polls.repository import (
        AuthorRepository,
        PollRepository,
        StatementRepository,
    )
    from ...domain.voting.repository import ResponseRepository


class ListPublicPollsQuery(BaseModel):
    model_config = ConfigDict(frozen=True)


class PublicPollSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: EntityId
    slug: str
    title: str
    user_id: str
    statement_count: NonNegativeInt
    respondent_count: NonNegativeInt = 0
    author_name: str = ANONYMOUS_NAME
    author_avatar_url: str = ANONYMOUS_AVATAR_URL

    @property
    def respondents_label(self) -> str:
        return RespondentCounter.respondent_label(self.respondent_count)


class ListPublicPollsHandler:
    """Public polls, newest first, with statement and respondent counts.

    Polls without any statements are left out. The statement count covers
    every statement in the poll.
    """

    def __init__(
        self,
        *,
        poll_repository: PollRepository,
        statement_repository: StatementRepository,
        response_repository: ResponseRepository,
        author_repository: AuthorRepository,
    ) -> None:
        self._poll_repo = poll_repository
        self._statement_repo = statement_repository
        self._response_repo = response_repository
        self._author_repo = author_repository

    async def handle(self, query: ListPublicPollsQuery) -> list[PublicPollSummary]:
        polls = await self._poll_repo.list_public()
        poll_ids = [p.id for p in polls if p.id is not None]
        if not poll_ids:
            return []

        statement_counts = await self._statement_repo.count_by_poll(poll_ids)
        respondents = RespondentCounter.count_by_poll(
            await self._response_repo.respondent_keys(poll_ids)
        )
        authors = await self._author_repo.get_many({p.user_id for p in polls})

        summaries: list[PublicPollSummary] = []
        for poll in polls:
            statement_count = statement_counts.get(poll.id, 0)  # type: ignore[arg-type]
            if statement_count == 0:
                continue
            author = authors.get(poll.user_id)
            summaries.append(
                PublicPollSummary(
                    id=poll.id,
                    slug=poll.slug,
                    title=poll.title,
                    user_id=poll.user_id,
                    statement_count=statement_count,
                    respondent_count=respondents.get(poll.id, 0),  # type: ignore[arg-type]
                    author_name=author.display_name if author else ANONYMOUS_NAME,
                    author_avatar_url=author.avatar if author else ANONYMOUS_AVATAR_URL,
                )
            )
        return summaries

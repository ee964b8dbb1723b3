"""Request bodies and JSON views of domain objects for the HTTP API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from ...domain.shared.datetime_utils import UtcDateTime

if TYPE_CHECKING:
    from ...application.queries.list_public_polls import PublicPollSummary
    from ...application.queries.list_responses import PollResponses
    from ...application.services.voting_session import VotingSessionController
    from ...domain.polls.entities import Poll, Statement
    from ...domain.voting.entities import Reaction


class ReactionBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    statement_id: int
    valence: str


class StatementBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str


# === Views ===


def poll_view(poll: Poll) -> dict[str, Any]:
    return {
        "id": poll.id,
        "slug": poll.slug,
        "title": poll.title,
        "core_question": poll.core_question,
        "user_id": poll.user_id,
        "visibility": poll.visibility.value,
        "polis_id": poll.polis_id,
        "created_at": UtcDateTime(poll.created_at).iso_z,
    }


def statement_view(statement: Statement) -> dict[str, Any]:
    # session ids identify anonymous voters and stay server-side
    return {
        "id": statement.id,
        "poll_id": statement.poll_id,
        "text": statement.text,
        "user_id": statement.user_id,
        "created_at": UtcDateTime(statement.created_at).iso_z,
    }


def reaction_view(reaction: Reaction) -> dict[str, Any]:
    return {
        "id": reaction.id,
        "statement_id": reaction.statement_id,
        "user_id": reaction.voter.user_id,
        "session_id": reaction.voter.session_id,
        "valence": reaction.valence.value,
        "created_at": UtcDateTime(reaction.created_at).iso_z,
    }


def responses_view(result: PollResponses) -> dict[str, Any]:
    return {
        "poll_id": result.poll_id,
        "responses": [reaction_view(r) for r in result.responses],
        "tally": {valence.value: count for valence, count in result.tally.items()},
    }


def poll_summary_view(summary: PublicPollSummary) -> dict[str, Any]:
    return {
        "id": summary.id,
        "slug": summary.slug,
        "title": summary.title,
        "statement_count": summary.statement_count,
        "respondent_count": summary.respondent_count,
        "respondents_label": summary.respondents_label,
        "author": {"name": summary.author_name, "avatar_url": summary.author_avatar_url},
    }


def session_view(poll_id: int, controller: VotingSessionController) -> dict[str, Any]:
    """What the swipe UI renders: the active card and whether the stack is empty."""
    active = controller.active_statement
    return {
        "poll_id": poll_id,
        "state": controller.state.value,
        "exhausted": controller.is_exhausted,
        "remaining": controller.remaining,
        "active_statement": statement_view(active) if active is not None else None,
        "statements": [statement_view(s) for s in controller.statements],
        "pending_writes": len(controller.pending_reactions),
        "failed_writes": len(controller.failed_reactions),
    }

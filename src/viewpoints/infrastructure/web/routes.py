"""HTTP routes for polls, responses, statements and swipe voting sessions."""

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from ...application.commands.create_statement import CreateStatementCommand
from ...application.commands.delete_statement import DeleteStatementCommand
from ...application.commands.record_response import RecordResponseCommand
from ...application.queries.get_embedded_poll import GetEmbeddedPollQuery
from ...application.queries.list_public_polls import ListPublicPollsQuery
from ...application.queries.list_responses import ListPollResponsesQuery
from ...application.services.voting_session import VotingSessionController
from ...config.container import Container
from ...domain.polls.entities import Statement
from ...domain.shared.exceptions import InvalidOperationError
from ...domain.shared.messages import ErrorMessages
from ...domain.voting.value_objects import VoterIdentity
from .dependencies import get_container, get_identity, require_identity
from .schemas import (
    ReactionBody,
    StatementBody,
    poll_summary_view,
    poll_view,
    reaction_view,
    responses_view,
    session_view,
    statement_view,
)
from .urls import get_absolute_url

_FALSE_FLAGS = frozenset({"0", "false", "no", "off"})

router = APIRouter()


def _flag(request: Request, name: str) -> bool:
    """A bare ``?name`` switches a flag on, as does any value but a false-ish one."""
    if name not in request.query_params:
        return False
    return request.query_params[name].strip().lower() not in _FALSE_FLAGS


@router.get("/health")
async def health(container: Container = Depends(get_container)) -> dict[str, Any]:
    """Liveness plus row counts; a failing stats query reports ``degraded``."""
    db_stats = await container.database.get_stats()
    return {
        "status": "degraded" if "error" in db_stats else "ok",
        "database": {
            "initialized": db_stats["initialized"],
            "tables": db_stats["tables"],
        },
        "voting_sessions": container.voting_session_service.active_session_count,
    }


# === Polls ===


@router.get("/api/polls")
async def list_public_polls(container: Container = Depends(get_container)) -> list[dict[str, Any]]:
    summaries = await container.list_public_polls_handler.handle(ListPublicPollsQuery())
    return [poll_summary_view(s) for s in summaries]


@router.get("/api/iframe/polls/{polis_id}")
async def get_embedded_poll(
    polis_id: str,
    request: Request,
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    embedded = await container.get_embedded_poll_handler.handle(
        GetEmbeddedPollQuery(polis_id=polis_id)
    )
    base_url = get_absolute_url(request.headers, container.settings.web.localhost_address)
    return {
        "poll": poll_view(embedded.poll),
        "statements": [statement_view(s) for s in embedded.statements],
        "url": f"{base_url}/polls/{embedded.poll.slug}",
    }


# === Responses and statements ===


@router.get("/api/polls/{poll_id}/responses")
async def list_responses(
    poll_id: int,
    request: Request,
    identity: VoterIdentity | None = Depends(get_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    result = await container.list_responses_handler.handle(
        ListPollResponsesQuery(poll_id=poll_id, voter=identity, include_all=_flag(request, "all"))
    )
    return responses_view(result)


@router.post("/api/polls/{poll_id}/responses", status_code=status.HTTP_201_CREATED)
async def record_response(
    poll_id: int,
    body: ReactionBody,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    reaction = await container.record_response_handler.handle(
        RecordResponseCommand(
            statement_id=body.statement_id,
            valence=body.valence,
            voter=identity,
            poll_id=poll_id,
        )
    )
    return reaction_view(reaction)


@router.post("/api/polls/{poll_id}/statements", status_code=status.HTTP_201_CREATED)
async def create_statement(
    poll_id: int,
    body: StatementBody,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    statement = await container.create_statement_handler.handle(
        CreateStatementCommand(poll_id=poll_id, text=body.text, author=identity)
    )
    return statement_view(statement)


@router.delete("/api/comments/{statement_id}")
async def delete_statement(
    statement_id: int,
    identity: VoterIdentity | None = Depends(get_identity),
    container: Container = Depends(get_container),
) -> dict[str, bool]:
    user_id = identity.user_id if identity is not None else None
    await container.delete_statement_handler.handle(
        DeleteStatementCommand(statement_id=statement_id, user_id=user_id)
    )
    return {"success": True}


# === Voting sessions ===


@router.get("/api/polls/{poll_id}/session")
async def get_session(
    poll_id: int,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    controller = await container.voting_session_service.get_or_start(poll_id, identity)
    return session_view(poll_id, controller)


@router.post("/api/polls/{poll_id}/session/reactions")
async def react(
    poll_id: int,
    body: ReactionBody,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    controller = await container.voting_session_service.get_or_start(poll_id, identity)
    statement = _find_queued(controller, body.statement_id)
    await controller.react(statement, body.valence)
    return session_view(poll_id, controller)


@router.post("/api/polls/{poll_id}/session/retry")
async def retry_failed(
    poll_id: int,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    controller = await container.voting_session_service.get_or_start(poll_id, identity)
    retried = await controller.retry_failed()
    return {"retried": retried, **session_view(poll_id, controller)}


@router.delete("/api/polls/{poll_id}/session")
async def discard_session(
    poll_id: int,
    identity: VoterIdentity = Depends(require_identity),
    container: Container = Depends(get_container),
) -> dict[str, bool]:
    discarded = await container.voting_session_service.discard(poll_id, identity)
    return {"success": discarded}


def _find_queued(controller: VotingSessionController, statement_id: int) -> Statement:
    for statement in controller.statements:
        if statement.id == statement_id:
            return statement
    raise InvalidOperationError(
        "react",
        controller.state.value,
        message=ErrorMessages.NOT_ACTIVE_STATEMENT.format(statement_id=statement_id),
    )

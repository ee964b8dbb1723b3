"""
Application Queries (CQRS Read Side)

Query objects and their handlers for read operations.
"""

from viewpoints.application.queries.get_embedded_poll import (
    EmbeddedPoll,
    GetEmbeddedPollHandler,
    GetEmbeddedPollQuery,
)
from viewpoints.application.queries.list_public_polls import (
    ListPublicPollsHandler,
    ListPublicPollsQuery,
    PublicPollSummary,
)
from viewpoints.application.queries.list_responses import (
    ListPollResponsesHandler,
    ListPollResponsesQuery,
    PollResponses,
)

__all__ = [
    "ListPollResponsesQuery",
    "ListPollResponsesHandler",
    "PollResponses",
    "ListPublicPollsQuery",
    "ListPublicPollsHandler",
    "PublicPollSummary",
    "GetEmbeddedPollQuery",
    "GetEmbeddedPollHandler",
    "EmbeddedPoll",
]

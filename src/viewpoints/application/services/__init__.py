"""Application services."""

from viewpoints.application.services.voting_session import VotingSessionController
from viewpoints.application.services.voting_session_service import VotingSessionService

__all__ = [
    "VotingSessionController",
    "VotingSessionService",
]

"""
Voting Bounded Context

Domain logic for reacting to statements and recording responses.
"""

from viewpoints.domain.voting.entities import Reaction, VotingQueue
from viewpoints.domain.voting.repository import ResponseRepository
from viewpoints.domain.voting.services import RespondentCounter
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity, VotingState

__all__ = [
    # Entities
    "Reaction",
    "VotingQueue",
    # Value Objects
    "Valence",
    "VoterIdentity",
    "VotingState",
    # Repository
    "ResponseRepository",
    # Services
    "RespondentCounter",
]

"""
Polls Bounded Context

Polls, their statements, and the authors who own them.
"""

from viewpoints.domain.polls.entities import Author, Poll, Statement
from viewpoints.domain.polls.repository import (
    AuthorRepository,
    PollRepository,
    StatementRepository,
)
from viewpoints.domain.polls.services import PollAccessPolicy
from viewpoints.domain.polls.value_objects import Visibility

__all__ = [
    # Entities
    "Poll",
    "Statement",
    "Author",
    # Value Objects
    "Visibility",
    # Repositories
    "PollRepository",
    "StatementRepository",
    "AuthorRepository",
    # Services
    "PollAccessPolicy",
]

"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- polls/: Polls, statements, authors and access rules
- voting/: Reactions, voter identity and the voting queue
"""

from viewpoints.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]

"""SQLite repository implementations."""

from viewpoints.infrastructure.persistence.repositories.author_repository import (
    SQLiteAuthorRepository,
)
from viewpoints.infrastructure.persistence.repositories.poll_repository import (
    SQLitePollRepository,
)
from viewpoints.infrastructure.persistence.repositories.response_repository import (
    SQLiteResponseRepository,
)
from viewpoints.infrastructure.persistence.repositories.statement_repository import (
    SQLiteStatementRepository,
)

__all__ = [
    "SQLitePollRepository",
    "SQLiteStatementRepository",
    "SQLiteResponseRepository",
    "SQLiteAuthorRepository",
]

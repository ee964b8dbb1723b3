"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite repositories)
- Web (FastAPI routes, request identity)
"""

from viewpoints.infrastructure.persistence.database import Database

__all__ = [
    "Database",
]

"""SQLite persistence: database manager and repositories."""

from viewpoints.infrastructure.persistence.database import Database

__all__ = ["Database"]

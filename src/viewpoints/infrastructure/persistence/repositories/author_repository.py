"""SQLite implementation of the author repository."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from viewpoints.domain.polls.entities import Author
from viewpoints.domain.polls.repository import AuthorRepository
from viewpoints.domain.shared.datetime_utils import UtcDateTime
from viewpoints.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteAuthorRepository(AuthorRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, Author]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}

        placeholders = ", ".join("?" for _ in ids)
        rows = await self._db.fetch_all(
            f"SELECT * FROM authors WHERE user_id IN ({placeholders})",  # noqa: S608
            tuple(ids),
        )
        return {
            row["user_id"]: Author(
                user_id=row["user_id"],
                name=row["name"],
                avatar_url=row["avatar_url"],
                updated_at=UtcDateTime.from_db(row["updated_at"]).dt,
            )
            for row in rows
        }

    async def save(self, author: Author) -> None:
        await self._db.execute(
            """
            INSERT INTO authors (user_id, name, avatar_url, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                name = excluded.name,
                avatar_url = excluded.avatar_url,
                updated_at = excluded.updated_at
            """,
            (author.user_id, author.name, author.avatar_url, UtcDateTime(author.updated_at).db),
        )
        logger.debug(LogTemplates.AUTHOR_SAVED, author.user_id)

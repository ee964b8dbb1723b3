"""SQLite implementation of the poll repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from viewpoints.domain.polls.entities import Poll
from viewpoints.domain.polls.repository import PollRepository
from viewpoints.domain.polls.value_objects import Visibility
from viewpoints.domain.shared.datetime_utils import UtcDateTime
from viewpoints.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLitePollRepository(PollRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, poll_id: int) -> Poll | None:
        row = await self._db.fetch_one("SELECT * FROM polls WHERE id = ?", (poll_id,))
        return self._row_to_poll(row) if row else None

    async def get_by_slug(self, slug: str) -> Poll | None:
        row = await self._db.fetch_one("SELECT * FROM polls WHERE slug = ?", (slug,))
        return self._row_to_poll(row) if row else None

    async def get_by_polis_id(self, polis_id: str) -> Poll | None:
        row = await self._db.fetch_one(
            "SELECT * FROM polls WHERE polis_id = ? ORDER BY id LIMIT 1", (polis_id,)
        )
        return self._row_to_poll(row) if row else None

    async def save(self, poll: Poll) -> Poll:
        created_at = UtcDateTime(poll.created_at).db

        if poll.id is None:
            async with self._db.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO polls
                        (slug, title, core_question, user_id, visibility, polis_id, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        poll.slug,
                        poll.title,
                        poll.core_question,
                        poll.user_id,
                        poll.visibility.value,
                        poll.polis_id,
                        created_at,
                    ),
                )
                saved = poll.model_copy(update={"id": cursor.lastrowid})
        else:
            await self._db.execute(
                """
                INSERT INTO polls
                    (id, slug, title, core_question, user_id, visibility, polis_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug = excluded.slug,
                    title = excluded.title,
                    core_question = excluded.core_question,
                    user_id = excluded.user_id,
                    visibility = excluded.visibility,
                    polis_id = excluded.polis_id
                """,
                (
                    poll.id,
                    poll.slug,
                    poll.title,
                    poll.core_question,
                    poll.user_id,
                    poll.visibility.value,
                    poll.polis_id,
                    created_at,
                ),
            )
            saved = poll

        logger.debug(LogTemplates.POLL_SAVED, saved.id, saved.slug)
        return saved

    async def list_public(self) -> list[Poll]:
        rows = await self._db.fetch_all(
            "SELECT * FROM polls WHERE visibility = ? ORDER BY id DESC",
            (Visibility.PUBLIC.value,),
        )
        return [self._row_to_poll(row) for row in rows]

    def _row_to_poll(self, row: dict[str, Any]) -> Poll:
        return Poll(
            id=row["id"],
            slug=row["slug"],
            title=row["title"],
            core_question=row["core_question"] or "",
            user_id=row["user_id"],
            visibility=Visibility(row["visibility"]),
            polis_id=row["polis_id"],
            created_at=UtcDateTime.from_db(row["created_at"]).dt,
        )

"""SQLite implementation of the statement repository."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from viewpoints.domain.polls.entities import Statement
from viewpoints.domain.polls.repository import StatementRepository
from viewpoints.domain.shared.datetime_utils import UtcDateTime

if TYPE_CHECKING:
    from ..database import Database


class SQLiteStatementRepository(StatementRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, statement_id: int) -> Statement | None:
        row = await self._db.fetch_one(
            "SELECT * FROM statements WHERE id = ?", (statement_id,)
        )
        return self._row_to_statement(row) if row else None

    async def list_for_poll(self, poll_id: int) -> list[Statement]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM statements
            WHERE poll_id = ?
            ORDER BY created_at ASC, id ASC
            """,
            (poll_id,),
        )
        return [self._row_to_statement(row) for row in rows]

    async def add(self, statement: Statement) -> Statement:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO statements (poll_id, text, user_id, session_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    statement.poll_id,
                    statement.text,
                    statement.user_id,
                    statement.session_id,
                    UtcDateTime(statement.created_at).db,
                ),
            )
            return statement.with_id(cursor.lastrowid)

    async def delete(self, statement_id: int) -> int:
        # Count first: the cascade removes responses without reporting them.
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM responses WHERE statement_id = ?", (statement_id,)
            )
            row = await cursor.fetchone()
            responses = row[0] if row else 0

            await conn.execute("DELETE FROM statements WHERE id = ?", (statement_id,))
        return responses

    async def count_by_poll(self, poll_ids: Iterable[int]) -> dict[int, int]:
        ids = list(dict.fromkeys(poll_ids))
        if not ids:
            return {}

        placeholders = ", ".join("?" for _ in ids)
        rows = await self._db.fetch_all(
            f"""
            SELECT poll_id, COUNT(*) AS statement_count
            FROM statements
            WHERE poll_id IN ({placeholders})
            GROUP BY poll_id
            """,  # noqa: S608
            tuple(ids),
        )
        return {row["poll_id"]: row["statement_count"] for row in rows}

    def _row_to_statement(self, row: dict[str, Any]) -> Statement:
        return Statement(
            id=row["id"],
            poll_id=row["poll_id"],
            text=row["text"],
            user_id=row["user_id"],
            session_id=row["session_id"],
            created_at=UtcDateTime.from_db(row["created_at"]).dt,
        )

"""SQLite implementation of the response repository.

Also serves as the voting session's reaction sink.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from viewpoints.application.interfaces.reaction_sink import ReactionSink
from viewpoints.domain.shared.datetime_utils import UtcDateTime
from viewpoints.domain.shared.messages import LogTemplates
from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.repository import ResponseRepository
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteResponseRepository(ResponseRepository, ReactionSink):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def insert(self, reaction: Reaction) -> Reaction:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO responses (statement_id, user_id, session_id, valence, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    reaction.statement_id,
                    reaction.voter.user_id,
                    reaction.voter.session_id,
                    reaction.valence.value,
                    UtcDateTime(reaction.created_at).db,
                ),
            )
            stored = reaction.with_id(cursor.lastrowid)

        logger.debug(
            LogTemplates.RESPONSE_INSERTED,
            reaction.valence.value,
            reaction.statement_id,
            reaction.voter,
        )
        return stored

    async def list_for_poll(
        self, poll_id: int, voter: VoterIdentity | None = None
    ) -> list[Reaction]:
        sql = """
            SELECT r.* FROM responses r
            JOIN statements s ON s.id = r.statement_id
            WHERE s.poll_id = ?
        """
        params: tuple[Any, ...] = (poll_id,)
        if voter is not None:
            sql += f" AND r.{voter.field_name} = ?"
            params += (voter.value,)
        sql += " ORDER BY r.id ASC"

        rows = await self._db.fetch_all(sql, params)
        return [self._row_to_reaction(row) for row in rows]

    async def answered_statement_ids(self, poll_id: int, voter: VoterIdentity) -> set[int]:
        rows = await self._db.fetch_all(
            f"""
            SELECT DISTINCT r.statement_id FROM responses r
            JOIN statements s ON s.id = r.statement_id
            WHERE s.poll_id = ? AND r.{voter.field_name} = ?
            """,  # noqa: S608
            (poll_id, voter.value),
        )
        return {row["statement_id"] for row in rows}

    async def respondent_keys(
        self, poll_ids: Iterable[int]
    ) -> list[tuple[int, str | None, str | None]]:
        ids = list(dict.fromkeys(poll_ids))
        if not ids:
            return []

        placeholders = ", ".join("?" for _ in ids)
        rows = await self._db.fetch_all(
            f"""
            SELECT DISTINCT s.poll_id, r.user_id, r.session_id
            FROM responses r
            JOIN statements s ON s.id = r.statement_id
            WHERE s.poll_id IN ({placeholders})
            """,  # noqa: S608
            tuple(ids),
        )
        return [(row["poll_id"], row["user_id"], row["session_id"]) for row in rows]

    def _row_to_reaction(self, row: dict[str, Any]) -> Reaction:
        return Reaction(
            id=row["id"],
            statement_id=row["statement_id"],
            voter=VoterIdentity(user_id=row["user_id"], session_id=row["session_id"]),
            valence=Valence(row["valence"]),
            created_at=UtcDateTime.from_db(row["created_at"]).dt,
        )

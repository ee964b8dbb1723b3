"""SQLite storage for polls, statements, responses and authors.

Every operation opens its own aiosqlite connection in WAL mode, so concurrent
requests and fire-and-forget response writes never share a cursor. In-memory
databases hand out one connection at a time: shared-cache table locks fail
at once with SQLITE_LOCKED and are not retried by the busy timeout.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from viewpoints.domain.shared.constants import DatabaseTables, SQLPragmas
from viewpoints.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"
_URL_PREFIX = "sqlite:///"
_NOW = "(strftime('%Y-%m-%dT%H:%M:%f','now'))"

_SCHEMA: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.POLLS} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        slug TEXT NOT NULL UNIQUE,
        title TEXT NOT NULL,
        core_question TEXT NOT NULL DEFAULT '',
        user_id TEXT NOT NULL,
        visibility TEXT NOT NULL DEFAULT 'public',
        polis_id TEXT,
        created_at TEXT NOT NULL DEFAULT {_NOW}
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_polls_visibility ON polls(visibility)",
    "CREATE INDEX IF NOT EXISTS idx_polls_polis_id ON polls(polis_id)",
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.STATEMENTS} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        poll_id INTEGER NOT NULL REFERENCES polls(id) ON DELETE CASCADE,
        text TEXT NOT NULL,
        user_id TEXT,
        session_id TEXT,
        created_at TEXT NOT NULL DEFAULT {_NOW}
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_statements_poll_created ON statements(poll_id, created_at)",
    # A response belongs to exactly one of a user or an anonymous session.
    # Duplicate responses to a statement are not rejected here.
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.RESPONSES} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        statement_id INTEGER NOT NULL REFERENCES statements(id) ON DELETE CASCADE,
        user_id TEXT,
        session_id TEXT,
        valence TEXT NOT NULL CHECK (valence IN ('agree', 'disagree', 'skip')),
        created_at TEXT NOT NULL DEFAULT {_NOW},
        CHECK ((user_id IS NULL) <> (session_id IS NULL))
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_responses_statement ON responses(statement_id)",
    "CREATE INDEX IF NOT EXISTS idx_responses_user ON responses(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_responses_session ON responses(session_id)",
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.AUTHORS} (
        user_id TEXT PRIMARY KEY,
        name TEXT,
        avatar_url TEXT,
        updated_at TEXT NOT NULL DEFAULT {_NOW}
    )
    """,
)

_COUNTED_TABLES = (
    DatabaseTables.POLLS,
    DatabaseTables.STATEMENTS,
    DatabaseTables.RESPONSES,
    DatabaseTables.AUTHORS,
)


def path_from_url(url: str) -> str:
    """``sqlite:///data/x.db`` -> ``data/x.db``; bare paths pass through."""
    return url[len(_URL_PREFIX) :] if url.startswith(_URL_PREFIX) else url


class Database:
    """Connection factory and schema owner for one SQLite database.

    ``:memory:`` databases are opened as a named shared-cache URI and kept
    alive by one extra connection for as long as the instance is open.
    """

    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        self._db_path = path_from_url(url)
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10
        self._memory_uri = f"file:viewpoints-{uuid4().hex}?mode=memory&cache=shared"
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._memory_lock = asyncio.Lock()
        self._initialized = False

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def in_memory(self) -> bool:
        return self._db_path == MEMORY_PATH

    async def initialize(self) -> None:
        """Create missing tables and indexes. Safe to call repeatedly."""
        if self._initialized:
            return

        if self.in_memory:
            if self._keepalive_conn is None:
                self._keepalive_conn = await self._connect()
        else:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        async with self.transaction() as conn:
            for statement in _SCHEMA:
                await conn.execute(statement)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(
            self._memory_uri if self.in_memory else self._db_path,
            uri=self.in_memory,
            # Timestamps are ISO text with a 'T'; the stdlib converters expect a space.
            detect_types=0,
            timeout=self._connection_timeout,
        )
        conn.row_factory = aiosqlite.Row
        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))
        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """A fresh connection, closed on exit. Nothing is committed."""
        async with self._exclusive():
            conn = await self._connect()
            try:
                yield conn
            finally:
                await conn.close()

    @asynccontextmanager
    async def _exclusive(self) -> AsyncGenerator[None, None]:
        if not self.in_memory:
            yield
            return
        async with self._memory_lock:
            yield

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """A fresh connection that commits on success and rolls back on error."""
        async with self.connection() as conn:
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def execute(self, sql: str, parameters: tuple[Any, ...] | None = None) -> int:
        """Run one statement in its own transaction and return the affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            return cursor.rowcount

    async def fetch_one(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters)
            row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        async with self.connection() as conn:
            rows = await conn.execute_fetchall(sql, parameters)
        return [dict(row) for row in rows]

    async def get_stats(self) -> dict[str, Any]:
        """Row counts per table and page metrics, plus the file size for file databases.

        A failing query is logged and reported under ``error`` instead of raised.
        """
        stats: dict[str, Any] = {
            "db_path": self._db_path,
            "initialized": self._initialized,
            "tables": {},
        }

        if not self.in_memory:
            db_file = Path(self._db_path)
            if db_file.exists():
                stats["file_size_bytes"] = db_file.stat().st_size

        if not self._initialized:
            return stats

        try:
            async with self.connection() as conn:
                for table in _COUNTED_TABLES:
                    rows = await conn.execute_fetchall(f"SELECT COUNT(*) FROM {table}")  # noqa: S608
                    stats["tables"][table] = rows[0][0]
                stats["page_count"] = (await conn.execute_fetchall(SQLPragmas.PAGE_COUNT))[0][0]
                stats["page_size"] = (await conn.execute_fetchall(SQLPragmas.PAGE_SIZE))[0][0]
        except aiosqlite.Error as e:
            logger.error(LogTemplates.DATABASE_STATS_FAILED, e)
            stats["error"] = str(e)

        return stats

    async def close(self) -> None:
        """Release the in-memory keepalive connection, if any."""
        keepalive, self._keepalive_conn = self._keepalive_conn, None
        if keepalive is not None:
            await keepalive.close()
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)

"""
Integration Tests for the SQLite Repositories

Tests for:
- Database schema creation and stats
- SQLitePollRepository
- SQLiteStatementRepository (ordering, cascade deletes, counts)
- SQLiteResponseRepository (insert, filtering, respondents)
- SQLiteAuthorRepository
"""

import asyncio
import sqlite3
from datetime import timedelta

import pytest

from viewpoints.domain.polls.entities import Author, Poll, Statement
from viewpoints.domain.polls.value_objects import Visibility
from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.value_objects import Valence, VoterIdentity

# =============================================================================
# Database Tests
# =============================================================================


class TestDatabase:
    """Tests for the Database manager."""

    async def test_schema_created(self, in_memory_database):
        """Should create every table on initialize."""
        rows = await in_memory_database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        )
        tables = {row["name"] for row in rows}

        assert {"polls", "statements", "responses", "authors"} <= tables

    async def test_initialize_is_idempotent(self, in_memory_database):
        await in_memory_database.initialize()

        assert in_memory_database.is_initialized is True

    async def test_stats_count_rows(self, in_memory_database, saved_statements):
        stats = await in_memory_database.get_stats()

        assert stats["tables"]["polls"] == 1
        assert stats["tables"]["statements"] == 3
        assert stats["tables"]["responses"] == 0
        assert stats["page_size"] > 0

    async def test_file_database(self, tmp_path):
        """Should create parent directories for file databases."""
        from viewpoints.infrastructure.persistence.database import Database

        db = Database(f"sqlite:///{tmp_path}/nested/viewpoints.db")
        await db.initialize()
        try:
            assert (tmp_path / "nested" / "viewpoints.db").exists()
            stats = await db.get_stats()
            assert "file_size_bytes" in stats
        finally:
            await db.close()

    async def test_separate_memory_databases_are_isolated(self):
        from viewpoints.infrastructure.persistence.database import Database

        first, second = Database(":memory:"), Database(":memory:")
        await first.initialize()
        await second.initialize()
        try:
            await first.execute(
                "INSERT INTO polls (slug, title, user_id) VALUES (?, ?, ?)", ("a", "A", "u")
            )
            assert await second.fetch_all("SELECT * FROM polls") == []
        finally:
            await first.close()
            await second.close()

    async def test_reopening_file_database_keeps_schema(self, tmp_path):
        """Should initialize over an existing file, indexes included."""
        from viewpoints.infrastructure.persistence.database import Database

        url = f"sqlite:///{tmp_path}/viewpoints.db"
        first = Database(url)
        await first.initialize()
        await first.close()

        second = Database(url)
        await second.initialize()
        try:
            columns = {row["name"] for row in await second.fetch_all("PRAGMA table_info(polls)")}
            indexes = {row["name"] for row in await second.fetch_all("PRAGMA index_list(polls)")}
            assert {"polis_id", "core_question"} <= columns
            assert "idx_polls_polis_id" in indexes
        finally:
            await second.close()

    async def test_concurrent_writes_to_memory_database(
        self, saved_statements, response_repository
    ):
        """Should store overlapping inserts instead of failing on shared-cache locks."""
        statement = saved_statements[0]
        voters = [VoterIdentity.for_session(f"s-{i}") for i in range(20)]

        await asyncio.gather(
            *(
                response_repository.insert(
                    Reaction(statement_id=statement.id, voter=voter, valence=Valence.SKIP)
                )
                for voter in voters
            )
        )

        assert len(await response_repository.list_for_poll(statement.poll_id)) == 20


# =============================================================================
# Poll Repository Tests
# =============================================================================


class TestSQLitePollRepository:
    """Tests for SQLitePollRepository."""

    async def test_save_assigns_id(self, poll_repository):
        poll = await poll_repository.save(Poll(slug="one", title="One", user_id="u"))

        assert poll.id is not None
        fetched = await poll_repository.get(poll.id)
        assert fetched.model_dump(exclude={"created_at"}) == poll.model_dump(exclude={"created_at"})
        assert abs(fetched.created_at - poll.created_at) < timedelta(milliseconds=1)

    async def test_lookup_by_slug_and_polis_id(self, saved_poll, poll_repository):
        assert (await poll_repository.get_by_slug("remote-work")).id == saved_poll.id
        assert (await poll_repository.get_by_polis_id("polis-1")).id == saved_poll.id
        assert await poll_repository.get_by_slug("missing") is None
        assert await poll_repository.get_by_polis_id("missing") is None

    async def test_save_existing_updates(self, saved_poll, poll_repository):
        updated = saved_poll.model_copy(update={"title": "Hybrid work"})

        await poll_repository.save(updated)

        assert (await poll_repository.get(saved_poll.id)).title == "Hybrid work"

    async def test_list_public_newest_first(self, poll_repository):
        """Should list only public polls, highest id first."""
        first = await poll_repository.save(Poll(slug="first", title="First", user_id="u"))
        await poll_repository.save(
            Poll(slug="secret", title="Secret", user_id="u", visibility=Visibility.PRIVATE)
        )
        third = await poll_repository.save(Poll(slug="third", title="Third", user_id="u"))

        polls = await poll_repository.list_public()

        assert [p.id for p in polls] == [third.id, first.id]


# =============================================================================
# Statement Repository Tests
# =============================================================================


class TestSQLiteStatementRepository:
    """Tests for SQLiteStatementRepository."""

    async def test_list_oldest_first(self, saved_poll, saved_statements, statement_repository):
        statements = await statement_repository.list_for_poll(saved_poll.id)

        assert [s.text for s in statements] == [
            "Offices are obsolete",
            "Meetings should be async",
            "Pay by location",
        ]

    async def test_get_round_trips_identity_columns(self, saved_poll, statement_repository):
        stored = await statement_repository.add(
            Statement(poll_id=saved_poll.id, text="Anonymous idea", session_id="s1")
        )

        fetched = await statement_repository.get(stored.id)

        assert fetched.session_id == "s1"
        assert fetched.user_id is None
        assert abs(fetched.created_at - stored.created_at) < timedelta(milliseconds=1)

    async def test_delete_cascades_to_responses(
        self, saved_statements, statement_repository, response_repository
    ):
        """Should remove the statement's responses and report how many."""
        target = saved_statements[0]
        for session in ("s1", "s2"):
            await response_repository.insert(
                Reaction(
                    statement_id=target.id,
                    voter=VoterIdentity.for_session(session),
                    valence=Valence.AGREE,
                )
            )

        removed = await statement_repository.delete(target.id)

        assert removed == 2
        assert await statement_repository.get(target.id) is None
        remaining = await response_repository.list_for_poll(target.poll_id)
        assert remaining == []

    async def test_count_by_poll(self, saved_poll, saved_statements, statement_repository):
        assert await statement_repository.count_by_poll([saved_poll.id, 999]) == {
            saved_poll.id: 3
        }
        assert await statement_repository.count_by_poll([]) == {}

    async def test_statement_requires_existing_poll(self, statement_repository):
        """Should enforce the poll foreign key."""
        with pytest.raises(sqlite3.IntegrityError):
            await statement_repository.add(Statement(poll_id=12345, text="Orphan"))


# =============================================================================
# Response Repository Tests
# =============================================================================


class TestSQLiteResponseRepository:
    """Tests for SQLiteResponseRepository."""

    async def test_insert_assigns_id(self, saved_statements, response_repository):
        stored = await response_repository.insert(
            Reaction(
                statement_id=saved_statements[0].id,
                voter=VoterIdentity.for_user("u1"),
                valence=Valence.DISAGREE,
            )
        )

        assert stored.id is not None
        assert stored.valence is Valence.DISAGREE

    async def test_list_filters_by_voter(self, saved_poll, saved_statements, response_repository):
        user = VoterIdentity.for_user("u1")
        session = VoterIdentity.for_session("s1")
        await response_repository.insert(
            Reaction(statement_id=saved_statements[0].id, voter=user, valence="agree")
        )
        await response_repository.insert(
            Reaction(statement_id=saved_statements[1].id, voter=session, valence="skip")
        )

        everything = await response_repository.list_for_poll(saved_poll.id)
        mine = await response_repository.list_for_poll(saved_poll.id, session)

        assert len(everything) == 2
        assert [r.voter for r in mine] == [session]
        assert mine[0].valence is Valence.SKIP

    async def test_answered_statement_ids(
        self, saved_poll, saved_statements, response_repository
    ):
        voter = VoterIdentity.for_session("s1")
        await response_repository.insert(
            Reaction(statement_id=saved_statements[2].id, voter=voter, valence="agree")
        )

        answered = await response_repository.answered_statement_ids(saved_poll.id, voter)
        other = await response_repository.answered_statement_ids(
            saved_poll.id, VoterIdentity.for_session("s2")
        )

        assert answered == {saved_statements[2].id}
        assert other == set()

    async def test_respondent_keys_are_distinct(
        self, saved_poll, saved_statements, response_repository
    ):
        voter = VoterIdentity.for_user("u1")
        for statement in saved_statements:
            await response_repository.insert(
                Reaction(statement_id=statement.id, voter=voter, valence="agree")
            )

        keys = await response_repository.respondent_keys([saved_poll.id])

        assert keys == [(saved_poll.id, "u1", None)]
        assert await response_repository.respondent_keys([]) == []


# =============================================================================
# Author Repository Tests
# =============================================================================


class TestSQLiteAuthorRepository:
    """Tests for SQLiteAuthorRepository."""

    async def test_save_and_get_many(self, author_repository):
        await author_repository.save(Author(user_id="u1", name="Ada"))
        await author_repository.save(Author(user_id="u2", name="Grace"))

        authors = await author_repository.get_many(["u1", "u2", "missing"])

        assert set(authors) == {"u1", "u2"}
        assert authors["u1"].display_name == "Ada"

    async def test_save_upserts(self, author_repository):
        await author_repository.save(Author(user_id="u1", name="Old"))
        await author_repository.save(
            Author(user_id="u1", name="New", avatar_url="https://img.example/new.png")
        )

        author = (await author_repository.get_many(["u1"]))["u1"]

        assert author.name == "New"
        assert author.avatar == "https://img.example/new.png"

    async def test_get_many_empty(self, author_repository):
        assert await author_repository.get_many([]) == {}

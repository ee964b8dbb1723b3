import pytest
import pytest_asyncio

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from viewpoints.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def poll_repository(in_memory_database):
    """Create a poll repository with in-memory database."""
    from viewpoints.infrastructure.persistence.repositories.poll_repository import (
        SQLitePollRepository,
    )

    return SQLitePollRepository(in_memory_database)


@pytest_asyncio.fixture
async def statement_repository(in_memory_database):
    """Create a statement repository with in-memory database."""
    from viewpoints.infrastructure.persistence.repositories.statement_repository import (
        SQLiteStatementRepository,
    )

    return SQLiteStatementRepository(in_memory_database)


@pytest_asyncio.fixture
async def response_repository(in_memory_database):
    """Create a response repository with in-memory database."""
    from viewpoints.infrastructure.persistence.repositories.response_repository import (
        SQLiteResponseRepository,
    )

    return SQLiteResponseRepository(in_memory_database)


@pytest_asyncio.fixture
async def author_repository(in_memory_database):
    """Create an author repository with in-memory database."""
    from viewpoints.infrastructure.persistence.repositories.author_repository import (
        SQLiteAuthorRepository,
    )

    return SQLiteAuthorRepository(in_memory_database)


@pytest_asyncio.fixture
async def saved_poll(poll_repository):
    """A public poll stored in the in-memory database."""
    from viewpoints.domain.polls.entities import Poll

    return await poll_repository.save(
        Poll(slug="remote-work", title="Remote work", user_id="owner-1", polis_id="polis-1")
    )


@pytest_asyncio.fixture
async def saved_statements(saved_poll, statement_repository):
    """Three statements stored oldest first."""
    from datetime import UTC, datetime, timedelta

    from viewpoints.domain.polls.entities import Statement

    base = datetime(2024, 1, 1, tzinfo=UTC)
    stored = []
    for i, text in enumerate(["Offices are obsolete", "Meetings should be async", "Pay by location"]):
        stored.append(
            await statement_repository.add(
                Statement(
                    poll_id=saved_poll.id,
                    text=text,
                    user_id="owner-1",
                    created_at=base + timedelta(minutes=i),
                )
            )
        )
    return stored


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_statement():
    """Factory for unsaved-to-database statements that already carry an id."""
    from viewpoints.domain.polls.entities import Statement

    def _make(statement_id: int, poll_id: int = 1, text: str | None = None) -> Statement:
        return Statement(
            id=statement_id,
            poll_id=poll_id,
            text=text or f"Statement {statement_id}",
        )

    return _make


@pytest.fixture
def session_voter():
    """An anonymous voter identified by session cookie."""
    from viewpoints.domain.voting.value_objects import VoterIdentity

    return VoterIdentity.for_session("session-abc")


@pytest.fixture
def user_voter():
    """An authenticated voter."""
    from viewpoints.domain.voting.value_objects import VoterIdentity

    return VoterIdentity.for_user("user-42")


@pytest.fixture
def sample_poll():
    """Create a sample poll for testing."""
    from viewpoints.domain.polls.entities import Poll

    return Poll(id=1, slug="sample-poll", title="Sample poll", user_id="owner-1")

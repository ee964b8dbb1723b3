"""
Tests for the Voting Session Service

Tests for:
- Queue supply from stored statements (oldest first, newest active)
- Excluding statements the voter already answered
- One session per voter and poll
- Discard and shutdown draining in-flight writes
- Removing deleted statements from live sessions
- Restarting exhausted sessions and evicting idle ones
"""

import asyncio

import pytest

from viewpoints.application.services.voting_session_service import VotingSessionService
from viewpoints.domain.shared.exceptions import EntityNotFoundError
from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.value_objects import VoterIdentity


@pytest.fixture
def voting_sessions(poll_repository, statement_repository, response_repository):
    return VotingSessionService(
        poll_repository=poll_repository,
        statement_repository=statement_repository,
        response_repository=response_repository,
        sink=response_repository,
    )


class TestVotingSessionService:
    """Tests for VotingSessionService backed by SQLite."""

    async def test_start_presents_newest_statement_first(
        self, voting_sessions, saved_poll, saved_statements, session_voter
    ):
        controller = await voting_sessions.start(saved_poll.id, session_voter)

        assert [s.id for s in controller.statements] == [s.id for s in saved_statements]
        assert controller.active_statement.id == saved_statements[-1].id

    async def test_answered_statements_excluded(
        self, voting_sessions, saved_poll, saved_statements, response_repository, session_voter
    ):
        await response_repository.insert(
            Reaction(statement_id=saved_statements[-1].id, voter=session_voter, valence="agree")
        )

        controller = await voting_sessions.start(saved_poll.id, session_voter)

        assert controller.remaining == 2
        assert controller.active_statement.id == saved_statements[1].id

    async def test_other_voters_answers_do_not_count(
        self, voting_sessions, saved_poll, saved_statements, response_repository, session_voter
    ):
        await response_repository.insert(
            Reaction(
                statement_id=saved_statements[-1].id,
                voter=VoterIdentity.for_user("someone-else"),
                valence="agree",
            )
        )

        controller = await voting_sessions.start(saved_poll.id, session_voter)

        assert controller.remaining == 3

    async def test_unknown_poll(self, voting_sessions, session_voter):
        with pytest.raises(EntityNotFoundError):
            await voting_sessions.start(404, session_voter)

    async def test_get_or_start_reuses_session(
        self, voting_sessions, saved_poll, saved_statements, session_voter, user_voter
    ):
        first = await voting_sessions.get_or_start(saved_poll.id, session_voter)
        again = await voting_sessions.get_or_start(saved_poll.id, session_voter)
        other = await voting_sessions.get_or_start(saved_poll.id, user_voter)

        assert first is again
        assert other is not first
        assert voting_sessions.active_session_count == 2
        assert voting_sessions.get(saved_poll.id, session_voter) is first

    async def test_reactions_are_persisted(
        self, voting_sessions, saved_poll, saved_statements, response_repository, session_voter
    ):
        """Should write through the sink and resume where the voter left off."""
        controller = await voting_sessions.start(saved_poll.id, session_voter)
        await controller.react(controller.active_statement, "disagree")
        await controller.drain()

        stored = await response_repository.list_for_poll(saved_poll.id, session_voter)
        assert [r.statement_id for r in stored] == [saved_statements[-1].id]

        resumed = await voting_sessions.start(saved_poll.id, session_voter)
        assert resumed.remaining == 2

    async def test_discard(self, voting_sessions, saved_poll, saved_statements, session_voter):
        await voting_sessions.get_or_start(saved_poll.id, session_voter)

        assert await voting_sessions.discard(saved_poll.id, session_voter) is True
        assert await voting_sessions.discard(saved_poll.id, session_voter) is False
        assert voting_sessions.get(saved_poll.id, session_voter) is None

    async def test_shutdown_drains_and_forgets(
        self, voting_sessions, saved_poll, saved_statements, response_repository, session_voter
    ):
        controller = await voting_sessions.get_or_start(saved_poll.id, session_voter)
        await controller.react(controller.active_statement, "agree")

        await voting_sessions.shutdown()

        assert voting_sessions.active_session_count == 0
        assert len(await response_repository.list_for_poll(saved_poll.id)) == 1


class HeldSink:
    """Holds every insert until released."""

    def __init__(self) -> None:
        self.release = asyncio.Event()

    async def insert(self, reaction):
        await self.release.wait()
        return reaction


class TestConcurrentWrites:
    """Reactions from many sessions written to one in-memory database."""

    async def test_rapid_reactions_all_stored(
        self, voting_sessions, saved_poll, saved_statements, response_repository
    ):
        """Should store every reaction issued before any write is awaited."""
        controllers = [
            await voting_sessions.get_or_start(saved_poll.id, VoterIdentity.for_session(f"s-{i}"))
            for i in range(10)
        ]
        for controller in controllers:
            while not controller.is_exhausted:
                await controller.react(controller.active_statement, "skip")

        await asyncio.gather(*(c.drain() for c in controllers))

        assert all(c.failed_reactions == () for c in controllers)
        assert len(await response_repository.list_for_poll(saved_poll.id)) == 30


class TestDeletedStatements:
    """Tests for forget_statement() across live sessions."""

    async def test_deleted_statement_leaves_open_sessions(
        self,
        voting_sessions,
        saved_poll,
        saved_statements,
        statement_repository,
        session_voter,
        user_voter,
    ):
        first = await voting_sessions.get_or_start(saved_poll.id, session_voter)
        second = await voting_sessions.get_or_start(saved_poll.id, user_voter)
        doomed = saved_statements[-1].id

        await statement_repository.delete(doomed)
        assert voting_sessions.forget_statement(doomed) == 2

        for controller in (first, second):
            assert controller.active_statement.id == saved_statements[1].id
            await controller.react(controller.active_statement, "agree")
            await controller.drain()
            assert controller.failed_reactions == ()

    async def test_unqueued_statement_touches_nothing(
        self, voting_sessions, saved_poll, saved_statements, session_voter
    ):
        await voting_sessions.get_or_start(saved_poll.id, session_voter)

        assert voting_sessions.forget_statement(999) == 0


class TestSessionLifetime:
    """Tests for restarting and evicting sessions."""

    async def test_exhausted_session_restarts_with_new_statements(
        self, voting_sessions, saved_poll, saved_statements, statement_repository, session_voter
    ):
        """Should show a returning voter statements added after they ran out."""
        from viewpoints.domain.polls.entities import Statement

        controller = await voting_sessions.get_or_start(saved_poll.id, session_voter)
        while not controller.is_exhausted:
            await controller.react(controller.active_statement, "agree")
        await controller.drain()

        added = await statement_repository.add(Statement(poll_id=saved_poll.id, text="Late idea"))
        resumed = await voting_sessions.get_or_start(saved_poll.id, session_voter)

        assert resumed is not controller
        assert [s.id for s in resumed.statements] == [added.id]

    async def test_exhausted_session_with_pending_writes_kept(
        self,
        poll_repository,
        statement_repository,
        response_repository,
        saved_poll,
        saved_statements,
        session_voter,
    ):
        sink = HeldSink()
        service = VotingSessionService(
            poll_repository=poll_repository,
            statement_repository=statement_repository,
            response_repository=response_repository,
            sink=sink,
        )
        controller = await service.get_or_start(saved_poll.id, session_voter)
        while not controller.is_exhausted:
            await controller.react(controller.active_statement, "agree")

        assert await service.get_or_start(saved_poll.id, session_voter) is controller

        sink.release.set()
        await controller.drain()

    async def test_idle_sessions_evicted_past_limit(
        self,
        poll_repository,
        statement_repository,
        response_repository,
        saved_poll,
        saved_statements,
    ):
        """Should hold at most max_sessions, dropping the least recently used."""
        service = VotingSessionService(
            poll_repository=poll_repository,
            statement_repository=statement_repository,
            response_repository=response_repository,
            sink=response_repository,
            max_sessions=3,
        )
        voters = [VoterIdentity.for_session(f"visitor-{i}") for i in range(5)]
        for voter in voters:
            await service.get_or_start(saved_poll.id, voter)

        assert service.active_session_count == 3
        assert service.get(saved_poll.id, voters[0]) is None
        assert service.get(saved_poll.id, voters[1]) is None
        assert service.get(saved_poll.id, voters[4]) is not None
        assert len(service._locks) == 3

    async def test_recent_use_protects_from_eviction(
        self,
        poll_repository,
        statement_repository,
        response_repository,
        saved_poll,
        saved_statements,
    ):
        service = VotingSessionService(
            poll_repository=poll_repository,
            statement_repository=statement_repository,
            response_repository=response_repository,
            sink=response_repository,
            max_sessions=2,
        )
        a, b, c = (VoterIdentity.for_session(name) for name in ("a", "b", "c"))
        first = await service.get_or_start(saved_poll.id, a)
        await service.get_or_start(saved_poll.id, b)
        await service.get_or_start(saved_poll.id, a)
        await service.get_or_start(saved_poll.id, c)

        assert service.get(saved_poll.id, a) is first
        assert service.get(saved_poll.id, b) is None

    async def test_sessions_with_writes_in_flight_not_evicted(
        self,
        poll_repository,
        statement_repository,
        response_repository,
        saved_poll,
        saved_statements,
    ):
        sink = HeldSink()
        service = VotingSessionService(
            poll_repository=poll_repository,
            statement_repository=statement_repository,
            response_repository=response_repository,
            sink=sink,
            max_sessions=1,
        )
        busy_voter = VoterIdentity.for_session("busy")
        busy = await service.get_or_start(saved_poll.id, busy_voter)
        await busy.react(busy.active_statement, "agree")

        await service.get_or_start(saved_poll.id, VoterIdentity.for_session("other"))

        assert service.get(saved_poll.id, busy_voter) is busy
        assert service.active_session_count == 2

        sink.release.set()
        await busy.drain()

    async def test_unknown_poll_leaves_no_lock(self, voting_sessions, session_voter):
        with pytest.raises(EntityNotFoundError):
            await voting_sessions.get_or_start(404, session_voter)

        assert voting_sessions._locks == {}

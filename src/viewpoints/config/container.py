"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for all services, repositories, and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from fastapi import FastAPI

    from ..application.commands.create_statement import CreateStatementHandler
    from ..application.commands.delete_statement import DeleteStatementHandler
    from ..application.commands.record_response import RecordResponseHandler
    from ..application.interfaces.identity_resolver import IdentityResolver
    from ..application.queries.get_embedded_poll import GetEmbeddedPollHandler
    from ..application.queries.list_public_polls import ListPublicPollsHandler
    from ..application.queries.list_responses import ListPollResponsesHandler
    from ..application.services.voting_session_service import VotingSessionService
    from ..domain.shared.events import EventBus
    from ..infrastructure.persistence.database import Database
    from ..infrastructure.persistence.repositories import (
        SQLiteAuthorRepository,
        SQLitePollRepository,
        SQLiteResponseRepository,
        SQLiteStatementRepository,
    )
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _poll_repository: SQLitePollRepository | None = None
    _statement_repository: SQLiteStatementRepository | None = None
    _response_repository: SQLiteResponseRepository | None = None
    _author_repository: SQLiteAuthorRepository | None = None

    # Cross-cutting
    _event_bus: EventBus | None = None
    _identity_resolver: IdentityResolver | None = None

    # Application services
    _voting_session_service: VotingSessionService | None = None

    # Command handlers
    _record_response_handler: RecordResponseHandler | None = None
    _create_statement_handler: CreateStatementHandler | None = None
    _delete_statement_handler: DeleteStatementHandler | None = None

    # Query handlers
    _list_responses_handler: ListPollResponsesHandler | None = None
    _list_public_polls_handler: ListPublicPollsHandler | None = None
    _get_embedded_poll_handler: GetEmbeddedPollHandler | None = None

    # Web
    _app: FastAPI | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def poll_repository(self) -> SQLitePollRepository:
        """Get the poll repository."""
        if self._poll_repository is None:
            from ..infrastructure.persistence.repositories import SQLitePollRepository

            self._poll_repository = SQLitePollRepository(self.database)
        return self._poll_repository

    @property
    def statement_repository(self) -> SQLiteStatementRepository:
        """Get the statement repository."""
        if self._statement_repository is None:
            from ..infrastructure.persistence.repositories import SQLiteStatementRepository

            self._statement_repository = SQLiteStatementRepository(self.database)
        return self._statement_repository

    @property
    def response_repository(self) -> SQLiteResponseRepository:
        """Get the response repository, which doubles as the reaction sink."""
        if self._response_repository is None:
            from ..infrastructure.persistence.repositories import SQLiteResponseRepository

            self._response_repository = SQLiteResponseRepository(self.database)
        return self._response_repository

    @property
    def author_repository(self) -> SQLiteAuthorRepository:
        """Get the author repository."""
        if self._author_repository is None:
            from ..infrastructure.persistence.repositories import SQLiteAuthorRepository

            self._author_repository = SQLiteAuthorRepository(self.database)
        return self._author_repository

    # === Cross-cutting ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def identity_resolver(self) -> IdentityResolver:
        """Get the request identity resolver."""
        if self._identity_resolver is None:
            from ..infrastructure.web.identity import RequestIdentityResolver

            self._identity_resolver = RequestIdentityResolver(self.settings.identity)
        return self._identity_resolver

    # === Application Services ===

    @property
    def voting_session_service(self) -> VotingSessionService:
        """Get the voting session service."""
        if self._voting_session_service is None:
            from ..application.services.voting_session_service import VotingSessionService

            self._voting_session_service = VotingSessionService(
                poll_repository=self.poll_repository,
                statement_repository=self.statement_repository,
                response_repository=self.response_repository,
                sink=self.response_repository,
                event_bus=self.event_bus,
                max_sessions=self.settings.voting.max_sessions,
            )
        return self._voting_session_service

    # === Command Handlers ===

    @property
    def record_response_handler(self) -> RecordResponseHandler:
        """Get the record response command handler."""
        if self._record_response_handler is None:
            from ..application.commands.record_response import RecordResponseHandler

            self._record_response_handler = RecordResponseHandler(
                statement_repository=self.statement_repository,
                sink=self.response_repository,
            )
        return self._record_response_handler

    @property
    def create_statement_handler(self) -> CreateStatementHandler:
        """Get the create statement command handler."""
        if self._create_statement_handler is None:
            from ..application.commands.create_statement import CreateStatementHandler

            self._create_statement_handler = CreateStatementHandler(
                poll_repository=self.poll_repository,
                statement_repository=self.statement_repository,
                voting_sessions=self.voting_session_service,
                event_bus=self.event_bus,
            )
        return self._create_statement_handler

    @property
    def delete_statement_handler(self) -> DeleteStatementHandler:
        """Get the delete statement command handler."""
        if self._delete_statement_handler is None:
            from ..application.commands.delete_statement import DeleteStatementHandler

            self._delete_statement_handler = DeleteStatementHandler(
                poll_repository=self.poll_repository,
                statement_repository=self.statement_repository,
                voting_sessions=self.voting_session_service,
                event_bus=self.event_bus,
            )
        return self._delete_statement_handler

    # === Query Handlers ===

    @property
    def list_responses_handler(self) -> ListPollResponsesHandler:
        """Get the list responses query handler."""
        if self._list_responses_handler is None:
            from ..application.queries.list_responses import ListPollResponsesHandler

            self._list_responses_handler = ListPollResponsesHandler(
                poll_repository=self.poll_repository,
                response_repository=self.response_repository,
            )
        return self._list_responses_handler

    @property
    def list_public_polls_handler(self) -> ListPublicPollsHandler:
        """Get the public poll index query handler."""
        if self._list_public_polls_handler is None:
            from ..application.queries.list_public_polls import ListPublicPollsHandler

            self._list_public_polls_handler = ListPublicPollsHandler(
                poll_repository=self.poll_repository,
                statement_repository=self.statement_repository,
                response_repository=self.response_repository,
                author_repository=self.author_repository,
            )
        return self._list_public_polls_handler

    @property
    def get_embedded_poll_handler(self) -> GetEmbeddedPollHandler:
        """Get the embedded poll query handler."""
        if self._get_embedded_poll_handler is None:
            from ..application.queries.get_embedded_poll import GetEmbeddedPollHandler

            self._get_embedded_poll_handler = GetEmbeddedPollHandler(
                poll_repository=self.poll_repository,
                statement_repository=self.statement_repository,
            )
        return self._get_embedded_poll_handler

    # === Web ===

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application bound to this container."""
        if self._app is None:
            from ..infrastructure.web.app import create_app

            self._app = create_app(self)
        return self._app

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        try:
            if self._voting_session_service is not None:
                await self._voting_session_service.shutdown()
        except Exception as exc:
            logger.warning(LogTemplates.CONTAINER_SHUTDOWN_FAILED, "voting sessions", exc)

        if self._event_bus is not None:
            self._event_bus.clear()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

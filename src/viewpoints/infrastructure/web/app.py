"""FastAPI application factory bound to a dependency container."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pydantic
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ...domain.shared.exceptions import (
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    MissingVoterIdentityError,
    PermissionDeniedError,
    ValidationError,
)
from ...domain.shared.messages import LogTemplates
from .identity import SessionCookieMiddleware
from .routes import router

if TYPE_CHECKING:
    from ...config.container import Container

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins.
ERROR_STATUS: tuple[tuple[type[DomainError], int], ...] = (
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (MissingVoterIdentityError, status.HTTP_401_UNAUTHORIZED),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidOperationError, status.HTTP_409_CONFLICT),
)


def status_for(error: DomainError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_body(code: str, message: str) -> dict[str, str]:
    return {"error": code, "message": message}


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(LogTemplates.REQUEST_REJECTED, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=error_body(exc.code, exc.message))


async def _model_validation_handler(
    request: Request, exc: pydantic.ValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else str(exc)
    logger.info(LogTemplates.REQUEST_REJECTED, request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", message),
    )


def create_app(container: Container) -> FastAPI:
    """Build the HTTP app; the container is initialized and shut down with it."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await container.initialize()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title="viewpoints",
        description="Polls answered one statement at a time",
        debug=container.settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(SessionCookieMiddleware, settings=container.settings.identity)
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(pydantic.ValidationError, _model_validation_handler)
    app.include_router(router)

    return app

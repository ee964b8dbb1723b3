"""Request identity: authenticated user header or anonymous session cookie."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...application.interfaces.identity_resolver import IdentityResolver
from ...domain.shared.messages import LogTemplates
from ...domain.voting.value_objects import VoterIdentity

if TYPE_CHECKING:
    from starlette.types import ASGIApp

    from ...config.settings import IdentitySettings

logger = logging.getLogger(__name__)


class RequestIdentityResolver(IdentityResolver):
    """Resolves the user id header first, then the session cookie.

    An authenticated user never carries a session id in their identity,
    so responses are keyed on exactly one of the two.
    """

    def __init__(self, settings: IdentitySettings | None = None) -> None:
        from ...config.settings import IdentitySettings

        self._settings = settings or IdentitySettings()

    def resolve(self, request: Request) -> VoterIdentity | None:
        user_id = request.headers.get(self._settings.user_id_header, "").strip()
        if user_id:
            return VoterIdentity.for_user(user_id)

        session_id = getattr(request.state, "session_id", None) or request.cookies.get(
            self._settings.session_cookie_name
        )
        if session_id:
            return VoterIdentity.for_session(session_id)
        return None


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Issue an anonymous session id to every browser that lacks one."""

    def __init__(self, app: ASGIApp, settings: IdentitySettings) -> None:
        super().__init__(app)
        self._settings = settings

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        cookie_name = self._settings.session_cookie_name
        session_id = request.cookies.get(cookie_name)
        issued: str | None = None
        if not session_id:
            issued = session_id = str(uuid4())
            logger.debug(LogTemplates.SESSION_COOKIE_ISSUED, issued)

        request.state.session_id = session_id
        response = await call_next(request)

        if issued is not None:
            response.set_cookie(
                cookie_name,
                issued,
                max_age=self._settings.session_cookie_max_age_s,
                httponly=True,
                samesite="lax",
                secure=self._settings.secure_cookies,
            )
        return response

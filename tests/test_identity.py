"""
Tests for request identity resolution.

Tests for:
- User id header takes precedence over the session cookie
- Session id from request state or cookie
- Missing identity handling
"""

import pytest
from starlette.requests import Request

from viewpoints.config.settings import IdentitySettings
from viewpoints.domain.shared.exceptions import MissingVoterIdentityError
from viewpoints.infrastructure.web.identity import RequestIdentityResolver


def _request(headers: dict[str, str] | None = None, session_id: str | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "state": {},
    }
    request = Request(scope)
    if session_id is not None:
        request.state.session_id = session_id
    return request


@pytest.fixture
def resolver():
    return RequestIdentityResolver()


class TestRequestIdentityResolver:
    """Tests for RequestIdentityResolver."""

    def test_user_header_wins(self, resolver):
        identity = resolver.resolve(_request({"X-User-Id": "user-1"}, session_id="sess-1"))

        assert identity.user_id == "user-1"
        assert identity.session_id is None

    def test_blank_user_header_ignored(self, resolver):
        identity = resolver.resolve(_request({"X-User-Id": "   "}, session_id="sess-1"))

        assert identity.session_id == "sess-1"
        assert identity.user_id is None

    def test_session_from_request_state(self, resolver):
        assert resolver.resolve(_request(session_id="sess-2")).session_id == "sess-2"

    def test_session_from_cookie(self, resolver):
        identity = resolver.resolve(_request({"Cookie": "session_id=sess-3"}))

        assert identity.session_id == "sess-3"

    def test_no_identity(self, resolver):
        assert resolver.resolve(_request()) is None

    def test_require_raises_without_identity(self, resolver):
        with pytest.raises(MissingVoterIdentityError):
            resolver.require(_request())

    def test_custom_header_and_cookie_names(self):
        resolver = RequestIdentityResolver(
            IdentitySettings(user_id_header="X-Auth-User", session_cookie_name="vp")
        )

        assert resolver.resolve(_request({"X-Auth-User": "u9"})).user_id == "u9"
        assert resolver.resolve(_request({"Cookie": "vp=s9"})).session_id == "s9"
        assert resolver.resolve(_request({"X-User-Id": "ignored"})) is None

"""FastAPI dependencies resolving the container and the caller's identity."""

from fastapi import Depends, Request

from ...config.container import Container
from ...domain.voting.value_objects import VoterIdentity


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_identity(
    request: Request, container: Container = Depends(get_container)
) -> VoterIdentity | None:
    """The caller's identity, or None when neither header nor cookie is present."""
    return container.identity_resolver.resolve(request)


def require_identity(
    request: Request, container: Container = Depends(get_container)
) -> VoterIdentity:
    """Like :func:`get_identity` but answer 401 when there is no identity."""
    return container.identity_resolver.require(request)

"""Port interface for mapping a request to a voter identity."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ...domain.voting.value_objects import VoterIdentity


class IdentityResolver(ABC):
    """Interface for resolving who is behind a request."""

    @abstractmethod
    def resolve(self, request: Any) -> VoterIdentity | None:
        """Return the authenticated user or the anonymous session, never both.

        Returns None when neither is available.
        """
        ...

    def require(self, request: Any) -> VoterIdentity:
        """Like :meth:`resolve` but raise when no identity is available."""
        from ...domain.shared.exceptions import MissingVoterIdentityError

        identity = self.resolve(request)
        if identity is None:
            raise MissingVoterIdentityError()
        return identity

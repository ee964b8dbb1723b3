"""
Polls Domain Services

Access rules for poll administration and result visibility.
"""

from viewpoints.domain.polls.entities import Poll
from viewpoints.domain.shared.exceptions import EntityNotFoundError, PermissionDeniedError
from viewpoints.domain.shared.messages import ErrorMessages


class PollAccessPolicy:
    """Decides who may administer a poll or read its results."""

    @staticmethod
    def require_poll(poll: Poll | None, identifier: str | int) -> Poll:
        """Return the poll or raise if it does not exist."""
        if poll is None:
            raise EntityNotFoundError("Poll", identifier)
        return poll

    @classmethod
    def require_poll_admin(cls, poll: Poll | None, user_id: str | None) -> Poll:
        """Ensure the user owns the poll.

        Args:
            poll: The poll, or None when the lookup failed.
            user_id: The authenticated user, or None for anonymous callers.

        Raises:
            EntityNotFoundError: If the poll does not exist.
            PermissionDeniedError: If the user is not the poll owner.
        """
        poll = cls.require_poll(poll, "unknown")
        if not poll.is_admin(user_id):
            raise PermissionDeniedError(
                "administer poll", message=ErrorMessages.POLL_ADMIN_REQUIRED
            )
        return poll

    @classmethod
    def require_poll_admin_if_private(cls, poll: Poll | None, user_id: str | None) -> Poll:
        """Ensure private poll results are only read by the poll owner."""
        poll = cls.require_poll(poll, "unknown")
        if poll.is_private and not poll.is_admin(user_id):
            raise PermissionDeniedError("read poll results", message=ErrorMessages.PRIVATE_POLL)
        return poll

"""
Poll Domain Value Objects

Immutable value objects for the polls bounded context.
"""

from enum import Enum


class Visibility(Enum):
    """Who can see a poll and its results."""

    PUBLIC = "public"  # Listed on the index, results readable by anyone
    PRIVATE = "private"  # Unlisted, results restricted to the owner
    HIDDEN = "hidden"  # Unlisted, results readable by anyone with the link

    @property
    def is_listed(self) -> bool:
        """Whether the poll appears on the public index."""
        return self is Visibility.PUBLIC

    @property
    def restricts_results(self) -> bool:
        """Whether reading all responses requires the poll admin."""
        return self is Visibility.PRIVATE

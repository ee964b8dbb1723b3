"""
Voting Domain Services

Domain services containing voting business logic.
"""

from collections import Counter
from collections.abc import Iterable

from viewpoints.domain.voting.entities import Reaction
from viewpoints.domain.voting.value_objects import Valence


class RespondentCounter:
    """Counts respondents and tallies reactions."""

    @staticmethod
    def count_by_poll(keys: Iterable[tuple[int, str | None, str | None]]) -> dict[int, int]:
        """Count respondents per poll.

        A respondent is a distinct ``(user_id, session_id)`` pair among a
        poll's responses.

        Args:
            keys: ``(poll_id, user_id, session_id)`` triples, possibly repeated.

        Returns:
            Mapping of poll ID to respondent count.
        """
        counts: Counter[int] = Counter()
        for poll_id, _user_id, _session_id in set(keys):
            counts[poll_id] += 1
        return dict(counts)

    @staticmethod
    def tally(reactions: Iterable[Reaction]) -> dict[Valence, int]:
        """Count reactions per valence, including zero counts."""
        tally = {valence: 0 for valence in Valence}
        for reaction in reactions:
            tally[reaction.valence] += 1
        return tally

    @staticmethod
    def respondent_label(count: int) -> str:
        """Human-readable respondent count, e.g. ``1 respondent``."""
        noun = "respondent" if count == 1 else "respondents"
        return f"{count} {noun}"

"""Date/time helpers.

All timestamps are timezone-aware UTC in memory. Two text forms leave the
process:

- database: ``2024-01-01T12:30:00.250``, the same shape as the schema's
  ``strftime('%Y-%m-%dT%H:%M:%f','now')`` defaults, so rows written by the
  app and rows defaulted by SQLite sort together.
- API: RFC3339 with a trailing ``Z``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from ...domain.shared.messages import ErrorMessages


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """A small value-object wrapper around a timezone-aware UTC `datetime`."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    @classmethod
    def from_db(cls, value: str) -> UtcDateTime:
        """Parse a stored timestamp.

        Naive values are UTC. Offsets and a trailing ``Z`` are accepted too,
        for rows written before the storage format was fixed.
        """
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return cls(parsed)

    @property
    def db(self) -> str:
        """Naive UTC with millisecond precision."""
        return self.dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{self.dt.microsecond // 1000:03d}"

    @property
    def iso_z(self) -> str:
        """RFC3339 with trailing 'Z'."""
        return self.dt.isoformat().replace("+00:00", "Z")


def utcnow() -> datetime:
    """Preferred replacement for `datetime.now(UTC)`."""
    return datetime.now(UTC)

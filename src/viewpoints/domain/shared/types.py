"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across bounded contexts is defined here once,
so models can simply annotate their fields::

    from viewpoints.domain.shared.types import EntityId, NonEmptyStr

    class MyModel(BaseModel):
        poll_id: EntityId
        title: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

EntityId = Annotated[int, Field(gt=0)]
"""Positive database row identifier."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

STATEMENT_MAX_LENGTH: int = 500

StatementText = Annotated[str, Field(min_length=1, max_length=STATEMENT_MAX_LENGTH)]
"""Statement body: 1-500 characters."""

PollTitleStr = Annotated[str, Field(min_length=1, max_length=200)]
"""Poll title: 1-200 characters."""

SlugStr = Annotated[str, Field(pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", max_length=100)]
"""URL slug: lowercase words separated by single dashes."""

HttpUrlStr = Annotated[str, Field(pattern=r"^(https?://|data:image/)")]
"""Avatar URL: http(s) or an inline data URI."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if isinstance(v, datetime):
        if v.tzinfo is None:
            raise ValueError("datetime must be timezone-aware (UTC)")
        return v.astimezone(UTC)
    return v


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""

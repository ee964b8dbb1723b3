"""
Voting Domain Value Objects

Immutable value objects for the voting bounded context.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from viewpoints.domain.shared.exceptions import ValidationError
from viewpoints.domain.shared.messages import ErrorMessages


class Valence(Enum):
    """A respondent's reaction to a statement."""

    AGREE = "agree"
    DISAGREE = "disagree"
    SKIP = "skip"

    @classmethod
    def parse(cls, value: Valence | str) -> Valence:
        """Coerce a raw value into a Valence.

        Raises:
            ValidationError: If the value is not a known valence.
        """
        if isinstance(value, Valence):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(v.value for v in cls)
            raise ValidationError(
                ErrorMessages.INVALID_VALENCE.format(choices=choices), field="valence"
            ) from None


class VotingState(Enum):
    """The two states of a voting queue."""

    HAS_STATEMENTS = "has_statements"
    EXHAUSTED = "exhausted"


class VoterIdentity(BaseModel):
    """Who is voting: an authenticated user or an anonymous session, never both."""

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    session_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: (v if v not in ("", None) else None) for k, v in data.items()}
        return data

    @model_validator(mode="after")
    def _exactly_one(self) -> VoterIdentity:
        if self.user_id is not None and self.session_id is not None:
            raise ValueError(ErrorMessages.IDENTITY_BOTH_SET)
        if self.user_id is None and self.session_id is None:
            raise ValueError(ErrorMessages.IDENTITY_NONE_SET)
        return self

    @classmethod
    def for_user(cls, user_id: str) -> VoterIdentity:
        return cls(user_id=user_id)

    @classmethod
    def for_session(cls, session_id: str) -> VoterIdentity:
        return cls(session_id=session_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def field_name(self) -> str:
        """Name of the response column this identity is stored in."""
        return "user_id" if self.is_authenticated else "session_id"

    @property
    def value(self) -> str:
        return self.user_id if self.user_id is not None else self.session_id  # type: ignore[return-value]

    @property
    def key(self) -> str:
        """Stable string form, e.g. ``user:abc`` or ``session:123``."""
        prefix = "user" if self.is_authenticated else "session"
        return f"{prefix}:{self.value}"

    def __str__(self) -> str:
        return self.key

"""Core domain entities for the polls bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from viewpoints.domain.polls.value_objects import Visibility
from viewpoints.domain.shared.datetime_utils import utcnow
from viewpoints.domain.shared.messages import ErrorMessages
from viewpoints.domain.shared.types import (
    EntityId,
    HttpUrlStr,
    NonEmptyStr,
    PollTitleStr,
    SlugStr,
    StatementText,
    UtcDatetimeField,
)
from viewpoints.domain.shared.validators import is_email

ANONYMOUS_NAME = "Anonymous"
ANONYMOUS_AVATAR_URL = "/images/anonymous-avatar.png"


class Poll(BaseModel):
    """A set of statements that respondents react to."""

    model_config = ConfigDict(frozen=True)

    id: EntityId | None = None
    slug: SlugStr
    title: PollTitleStr
    core_question: str = ""
    user_id: NonEmptyStr
    visibility: Visibility = Visibility.PUBLIC
    polis_id: str | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(ErrorMessages.EMPTY_POLL_TITLE)
        return v

    @property
    def is_private(self) -> bool:
        return self.visibility.restricts_results

    def is_admin(self, user_id: str | None) -> bool:
        """The poll owner is its only admin."""
        return user_id is not None and user_id == self.user_id


class Statement(BaseModel):
    """A single poll item a respondent reacts to. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: EntityId | None = None
    poll_id: EntityId
    text: StatementText
    user_id: str | None = None
    session_id: str | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @field_validator("text", mode="before")
    @classmethod
    def _strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(ErrorMessages.EMPTY_STATEMENT_TEXT)
        return v

    def with_id(self, statement_id: int) -> Statement:
        return self.model_copy(update={"id": statement_id})


class Author(BaseModel):
    """Public profile of a poll owner, mirrored from the identity provider."""

    model_config = ConfigDict(frozen=True)

    user_id: NonEmptyStr
    name: str | None = None
    avatar_url: HttpUrlStr | None = None
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def display_name(self) -> str:
        """The author's name, unless it is missing or an email address."""
        if not self.name or is_email(self.name):
            return ANONYMOUS_NAME
        return self.name

    @property
    def avatar(self) -> str:
        return self.avatar_url or ANONYMOUS_AVATAR_URL

"""Data models for the chat session.

Messages are immutable once created. SessionState is a frozen snapshot of the
store, handed to subscribers after every mutation.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from uuid_extensions import uuid7

from .config import ASSISTANT_ID_PREFIX, USER_ID_PREFIX


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id(role: Role) -> str:
    """Create a time-ordered message id, e.g. ``user-0190c1a2-...``."""
    prefix = USER_ID_PREFIX if role == Role.USER else ASSISTANT_ID_PREFIX
    return f"{prefix}-{uuid7()}"


class Message(BaseModel):
    """A single entry of the conversation log."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique, time-ordered message id")
    content: str = Field(min_length=1, description="Message text")
    role: Role = Field(description="Who wrote the message")
    timestamp: datetime = Field(default_factory=_utcnow, description="Creation time")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Browser records may carry naive ISO strings
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def create(cls, role: Role, content: str) -> "Message":
        """Build a new message stamped with the current time."""
        return cls(id=new_message_id(role), content=content, role=role)


class SessionState(BaseModel):
    """Read-only view of the session consumed by the presentation layer."""

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...] = Field(default=(), description="Conversation in order")
    is_loading: bool = Field(default=False, description="A completion is outstanding")
    is_open: bool = Field(default=False, description="Widget panel is visible")
    error: str | None = Field(default=None, description="Last failure shown to the user")

    @model_validator(mode="after")
    def _loading_excludes_error(self) -> "SessionState":
        if self.is_loading and self.error is not None:
            raise ValueError("is_loading and error cannot both be set")
        return self

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

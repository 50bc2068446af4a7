from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class ConversationEntry(Protocol):
    """Anything with a role and content, e.g. a session Message."""

    @property
    def role(self) -> str: ...

    @property
    def content(self) -> str: ...


class ChatMessage(BaseModel):
    """Represents a chat message sent to a provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")

    @classmethod
    def from_entry(cls, entry: ConversationEntry) -> "ChatMessage":
        """Keep only role and content; ids and timestamps are not sent."""
        role = entry.role
        return cls(role=getattr(role, "value", role), content=entry.content)


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .errors import EMPTY_REPLY_MESSAGE, CompletionError
from .models import ChatMessage, ConversationEntry, LLMResponse


class CompletionClient(ABC):
    """The message-completion collaborator of a chat session.

    Takes the full ordered conversation and returns the assistant reply text.
    Failures surface as exceptions; ``CompletionError`` carries a message fit
    for the user. Implementations must let ``asyncio.CancelledError``
    propagate so the session can abandon a request.
    """

    @abstractmethod
    async def complete(self, messages: Sequence[ConversationEntry]) -> str:
        """Generate the next assistant reply.

        Args:
            messages: Conversation so far, oldest first (role and content are used)

        Returns:
            Reply text

        Raises:
            CompletionError: Service or transport failure
        """


class LLMProvider(CompletionClient):
    """Abstract base class for LLM providers.

    This module hides the design decision of which LLM provider to use.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Translating SDK errors into CompletionError

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            reply = await provider.complete(messages)
        # Automatically cleaned up
    """

    def __init__(
        self,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = 500,
    ):
        self._system_prompt = system_prompt
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def system_prompt(self) -> str | None:
        return self._system_prompt

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion.

        Args:
            messages: List of chat messages forming the conversation history
            model: Model to use (None uses provider's default)
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing generated content and metadata

        Raises:
            CompletionError: Provider errors translated for the user
        """
        pass

    @abstractmethod
    async def validate_api_key(self) -> bool:
        """Check the configured credentials against the service."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def build_messages(self, messages: Sequence[ConversationEntry]) -> list[ChatMessage]:
        """Prefix the system prompt and strip session-only fields."""
        wire = [ChatMessage.from_entry(message) for message in messages]
        if self._system_prompt:
            wire.insert(0, ChatMessage(role="system", content=self._system_prompt))
        return wire

    async def complete(self, messages: Sequence[ConversationEntry]) -> str:
        response = await self.chat_completion(
            self.build_messages(messages),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not response.content.strip():
            raise CompletionError(EMPTY_REPLY_MESSAGE)
        return response.content

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise

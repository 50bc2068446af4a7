from typing import Any

import openai
from openai import AsyncOpenAI

from ..base import LLMProvider
from ..errors import (
    CONNECTION_MESSAGE,
    EMPTY_REPLY_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    CompletionError,
    completion_error_from_status,
)
from ..models import ChatMessage, LLMResponse


def _service_message(error: openai.APIStatusError) -> str | None:
    """Pull the human-readable message out of an API error body."""
    body = error.body
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class OpenAIProvider(LLMProvider):
    """OpenAI LLM provider implementation.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion
    - Error translation into CompletionError
    - Authentication mechanism
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        organization: str | None = None,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = 500,
        presence_penalty: float = 0.6,
        frequency_penalty: float = 0.0,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key; when empty every request fails with a
                "key not found" CompletionError
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            system_prompt: Instructions prepended to every conversation
            temperature: Sampling temperature used by complete()
            max_tokens: Reply length limit used by complete()
            presence_penalty: Sent with every request
            frequency_penalty: Sent with every request
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        self._model = model
        self._presence_penalty = presence_penalty
        self._frequency_penalty = frequency_penalty
        self._client: AsyncOpenAI | None = None
        if api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                organization=organization,
                **client_kwargs
            )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def _require_client(self) -> AsyncOpenAI:
        if self._client is None:
            raise CompletionError(MISSING_API_KEY_MESSAGE)
        return self._client

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using OpenAI.

        Args:
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            LLMResponse with generated content

        Raises:
            CompletionError: Missing key, service error or connection failure
        """
        client = self._require_client()
        model_to_use = model or self._model

        openai_messages = [
            {"role": msg.role, "content": msg.content}
            for msg in messages
        ]

        # Build request params, only including max_tokens if set
        request_params: dict[str, Any] = {
            "model": model_to_use,
            "messages": openai_messages,
            "temperature": temperature,
            "presence_penalty": self._presence_penalty,
            "frequency_penalty": self._frequency_penalty,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        try:
            completion = await client.chat.completions.create(**request_params)
        except openai.APIConnectionError as e:
            raise CompletionError(CONNECTION_MESSAGE) from e
        except openai.APIStatusError as e:
            raise completion_error_from_status(e.status_code, _service_message(e)) from e

        if not completion.choices:
            raise CompletionError(EMPTY_REPLY_MESSAGE)

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage
        )

    async def validate_api_key(self) -> bool:
        """List models as a cheap authenticated call."""
        if self._client is None:
            return False
        try:
            await self._client.models.list()
        except openai.APIError:
            return False
        return True

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        if self._client is not None:
            await self._client.close()

"""Anthropic Claude LLM provider implementation.

Uses the official Anthropic Python SDK for async chat completions.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..errors import (
    CONNECTION_MESSAGE,
    EMPTY_REPLY_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    CompletionError,
    completion_error_from_status,
)
from ..models import ChatMessage, LLMResponse


def _service_message(error: anthropic.APIStatusError) -> str | None:
    """Anthropic wraps the message as {"type": "error", "error": {"message": ...}}."""
    body = error.body
    if isinstance(body, dict):
        details = body.get("error", body)
        if isinstance(details, dict):
            message = details.get("message")
            if isinstance(message, str) and message:
                return message
    return None


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM provider implementation.

    Hidden design decisions:
    - Anthropic API client initialization
    - Message format conversion (system message handling)
    - Error translation into CompletionError
    - Authentication mechanism
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = 500,
        **client_kwargs: Any
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            model: Default model to use (default: claude-sonnet-4-20250514)
            base_url: Optional custom API base URL
            system_prompt: Instructions sent as the system parameter
            temperature: Sampling temperature used by complete()
            max_tokens: Reply length limit used by complete()
            **client_kwargs: Additional kwargs for AsyncAnthropic client
        """
        super().__init__(
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        self._model = model
        self._client: AsyncAnthropic | None = None
        if api_key:
            self._client = AsyncAnthropic(
                api_key=api_key,
                base_url=base_url,
                **client_kwargs
            )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using Anthropic Claude.

        Args:
            messages: Conversation history
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate (default: 4096)
            **kwargs: Additional Anthropic-specific parameters

        Returns:
            LLMResponse with generated content
        """
        if self._client is None:
            raise CompletionError(MISSING_API_KEY_MESSAGE)

        model_to_use = model or self._model

        # Extract system message and convert to Anthropic format
        system_message = None
        anthropic_messages = []

        for msg in messages:
            if msg.role == "system":
                system_message = msg.content
            else:
                anthropic_messages.append({
                    "role": msg.role,
                    "content": msg.content
                })

        request_params: dict[str, Any] = {
            "model": model_to_use,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens or 4096,  # Anthropic requires max_tokens
            **kwargs
        }

        if system_message:
            request_params["system"] = system_message

        try:
            response = await self._client.messages.create(**request_params)
        except anthropic.APIConnectionError as e:
            raise CompletionError(CONNECTION_MESSAGE) from e
        except anthropic.APIStatusError as e:
            raise completion_error_from_status(e.status_code, _service_message(e)) from e

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens
            }

        # Extract content (handle multiple content blocks)
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        if not content:
            raise CompletionError(EMPTY_REPLY_MESSAGE)

        return LLMResponse(
            content=content,
            model=response.model,
            usage=usage
        )

    async def validate_api_key(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.models.list(limit=1)
        except anthropic.APIError:
            return False
        return True

    async def close(self) -> None:
        """Close the Anthropic client."""
        if self._client is not None:
            await self._client.close()

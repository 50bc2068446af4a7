"""Tests for completion providers.

Provider SDK clients are replaced with small fakes; the integration tests at
the bottom talk to the real services and need API keys.
"""
from types import SimpleNamespace

import anthropic
import httpx
import openai
import pytest

from sahamchat.chat import Message, Role
from sahamchat.llm import CompletionError, create_llm_provider
from sahamchat.llm.errors import (
    CONNECTION_MESSAGE,
    EMPTY_REPLY_MESSAGE,
    INVALID_API_KEY_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    RATE_LIMITED_MESSAGE,
    completion_error_from_status,
)
from sahamchat.llm.models import ChatMessage
from sahamchat.llm.providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider
from sahamchat.prompts import get_system_prompt

_REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat")


def _conversation() -> list[Message]:
    return [Message.create(Role.USER, "Apa itu IHSG?")]


def _status_error(module, status: int, body=None):
    response = httpx.Response(status, request=_REQUEST)
    return module.APIStatusError(f"HTTP {status}", response=response, body=body)


class FakeCompletions:
    """Records create() kwargs and returns or raises a canned outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


def _openai_completion(content: str | None, choices: bool = True):
    choice = SimpleNamespace(message=SimpleNamespace(content=content))
    return SimpleNamespace(choices=[choice] if choices else [], model="gpt-4o-mini", usage=None)


def _openai_provider(outcome, **kwargs) -> tuple[OpenAIProvider, FakeCompletions]:
    provider = OpenAIProvider(api_key="sk-test", **kwargs)
    completions = FakeCompletions(outcome)
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider, completions


def _anthropic_provider(outcome, **kwargs) -> tuple[AnthropicProvider, FakeCompletions]:
    provider = AnthropicProvider(api_key="sk-ant-test", **kwargs)
    messages = FakeCompletions(outcome)
    provider._client = SimpleNamespace(messages=messages)
    return provider, messages


class TestStatusMapping:
    """Tests for completion_error_from_status."""

    def test_unauthorized(self):
        error = completion_error_from_status(401, "Incorrect API key provided")
        assert error.message == INVALID_API_KEY_MESSAGE
        assert error.status_code == 401

    def test_rate_limited(self):
        assert completion_error_from_status(429).message == RATE_LIMITED_MESSAGE

    def test_service_message_passed_through(self):
        assert completion_error_from_status(500, "The server had an error").message == "The server had an error"

    def test_fallback_message(self):
        assert completion_error_from_status(503).message == "API call failed: 503"


class TestOpenAIProvider:
    """Tests for the OpenAI-compatible provider."""

    @pytest.mark.asyncio
    async def test_complete_sends_system_prompt_and_defaults(self):
        provider, completions = _openai_provider(
            _openai_completion("IHSG adalah indeks..."),
            system_prompt="Kamu adalah Asisten Cerdas.",
        )

        reply = await provider.complete(_conversation())

        assert reply == "IHSG adalah indeks..."
        request = completions.requests[0]
        assert request["messages"] == [
            {"role": "system", "content": "Kamu adalah Asisten Cerdas."},
            {"role": "user", "content": "Apa itu IHSG?"},
        ]
        assert request["model"] == "gpt-4o-mini"
        assert request["max_tokens"] == 500
        assert request["temperature"] == 0.7
        assert request["presence_penalty"] == 0.6
        assert request["frequency_penalty"] == 0.0

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = OpenAIProvider(api_key=None)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(_conversation())

        assert exc_info.value.message == MISSING_API_KEY_MESSAGE
        assert await provider.validate_api_key() is False
        await provider.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, body, expected",
        [
            (401, {"message": "Incorrect API key provided"}, INVALID_API_KEY_MESSAGE),
            (429, None, RATE_LIMITED_MESSAGE),
            (400, {"message": "This model's maximum context length is exceeded"},
             "This model's maximum context length is exceeded"),
            (502, None, "API call failed: 502"),
        ],
    )
    async def test_status_errors(self, status, body, expected):
        provider, _ = _openai_provider(_status_error(openai, status, body))

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(_conversation())

        assert exc_info.value.message == expected
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_connection_error(self):
        provider, _ = _openai_provider(openai.APIConnectionError(request=_REQUEST))

        with pytest.raises(CompletionError, match="Koneksi bermasalah"):
            await provider.complete(_conversation())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("completion", [_openai_completion(None), _openai_completion("x", choices=False)])
    async def test_empty_reply(self, completion):
        provider, _ = _openai_provider(completion)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(_conversation())

        assert exc_info.value.message == EMPTY_REPLY_MESSAGE

    def test_deepseek_defaults(self):
        provider = DeepSeekProvider(api_key="sk-test")

        assert provider.model == "deepseek-chat"
        assert isinstance(provider, OpenAIProvider)


class TestAnthropicProvider:
    """Tests for the Anthropic provider."""

    @pytest.mark.asyncio
    async def test_system_prompt_sent_separately(self):
        response = SimpleNamespace(
            content=[SimpleNamespace(text="IHSG adalah "), SimpleNamespace(text="indeks...")],
            model="claude-sonnet-4-20250514",
            usage=None,
        )
        provider, messages = _anthropic_provider(response, system_prompt="Kamu adalah Asisten Cerdas.")

        reply = await provider.complete(_conversation())

        assert reply == "IHSG adalah indeks..."
        request = messages.requests[0]
        assert request["system"] == "Kamu adalah Asisten Cerdas."
        assert request["messages"] == [{"role": "user", "content": "Apa itu IHSG?"}]
        assert request["max_tokens"] == 500

    @pytest.mark.asyncio
    async def test_nested_error_body(self):
        body = {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
        provider, _ = _anthropic_provider(_status_error(anthropic, 529, body))

        with pytest.raises(CompletionError, match="Overloaded"):
            await provider.complete(_conversation())

    @pytest.mark.asyncio
    async def test_connection_error(self):
        provider, _ = _anthropic_provider(anthropic.APIConnectionError(request=_REQUEST))

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(_conversation())

        assert exc_info.value.message == CONNECTION_MESSAGE

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = AnthropicProvider(api_key="")

        with pytest.raises(CompletionError, match="API key tidak ditemukan"):
            await provider.complete(_conversation())


class TestProviderFactory:
    """Tests for create_llm_provider."""

    def test_openai_uses_system_prompt(self):
        provider = create_llm_provider("openai", api_key="sk-test")

        assert isinstance(provider, OpenAIProvider)
        assert provider.system_prompt == get_system_prompt()
        assert "Saham Cerdas" in provider.system_prompt

    def test_claude_alias(self):
        provider = create_llm_provider("Claude", api_key="sk-ant-test", system_prompt=None)

        assert isinstance(provider, AnthropicProvider)
        assert provider.system_prompt is None

    def test_missing_api_key_argument(self):
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("deepseek")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("gemini", api_key="x")

    def test_build_messages_strips_session_fields(self):
        provider = create_llm_provider("openai", api_key="sk-test", system_prompt=None)

        wire = provider.build_messages(_conversation())

        assert wire == [ChatMessage(role="user", content="Apa itu IHSG?")]


@pytest.mark.integration
class TestLiveProviders:
    """Round trips against the real services."""

    @pytest.mark.asyncio
    async def test_openai_answers(self, api_keys):
        if not api_keys["openai"]:
            pytest.skip("OPENAI_API_KEY not set")

        async with create_llm_provider("openai", api_key=api_keys["openai"]) as provider:
            reply = await provider.complete(_conversation())

        assert reply.strip()

    @pytest.mark.asyncio
    async def test_anthropic_answers(self, api_keys):
        if not api_keys["anthropic"]:
            pytest.skip("ANTHROPIC_API_KEY not set")

        async with create_llm_provider("anthropic", api_key=api_keys["anthropic"]) as provider:
            reply = await provider.complete(_conversation())

        assert reply.strip()

from .base import CompletionClient, LLMProvider
from .errors import CompletionError
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse
from .providers import AnthropicProvider, DeepSeekProvider, OpenAIProvider

__all__ = [
    "CompletionClient",
    "CompletionError",
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "AnthropicProvider",
    "DeepSeekProvider",
    "OpenAIProvider",
]

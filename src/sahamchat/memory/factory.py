"""Factory for creating chat history backends."""

from typing import Any

from .base import ChatHistoryStore


def create_history_store(
    backend: str = "memory",
    **kwargs: Any
) -> ChatHistoryStore:
    """Create a chat history backend.

    Args:
        backend: Backend type ("memory", "file" or "sqlite")
        **kwargs: Backend-specific configuration
            For file:
                - path: directory holding one JSON file per key
            For sqlite:
                - path: database file

    Returns:
        ChatHistoryStore instance (not yet connected)

    Raises:
        ValueError: If backend type is not supported
    """
    backend_lower = backend.lower()

    if backend_lower == "memory":
        from .in_memory import InMemoryHistoryStore
        return InMemoryHistoryStore(**kwargs)

    elif backend_lower == "file":
        from .file import JsonFileHistoryStore
        return JsonFileHistoryStore(**kwargs)

    elif backend_lower == "sqlite":
        from .sqlite import SQLiteHistoryStore
        return SQLiteHistoryStore(**kwargs)

    raise ValueError(
        f"Unsupported history backend: {backend}. "
        f"Supported backends: memory, file, sqlite"
    )

"""Abstract base class for chat history storage backends.

This module defines the scoped key-value interface the session persistence
adapter writes to. The abstraction hides:
- Storage format (JSON files, SQLite rows, plain dict)
- Persistence mechanism (file, database, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod
from typing import Any


class ChatHistoryStore(ABC):
    """Abstract key-value store for serialized conversations.

    Values are opaque strings; encoding is the caller's concern.

    Supports async context manager protocol:
        async with create_history_store("sqlite", path="chat.db") as store:
            await store.write("key", "[]")
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the storage backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the storage backend gracefully."""

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Erase the record for a key. Deleting a missing key is not an error."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "ChatHistoryStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()

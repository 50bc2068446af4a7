"""In-memory chat history backend.

Simple dict-based storage for session-only history.
Data is lost when the application exits.
"""

from .base import ChatHistoryStore


class InMemoryHistoryStore(ChatHistoryStore):
    """In-memory history store (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self, records: dict[str, str] | None = None):
        self._records: dict[str, str] = dict(records or {})

    async def connect(self) -> None:
        """Initialize memory (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close memory (no-op for in-memory)."""
        pass

    async def read(self, key: str) -> str | None:
        return self._records.get(key)

    async def write(self, key: str, value: str) -> None:
        self._records[key] = value

    async def delete(self, key: str) -> None:
        self._records.pop(key, None)

    @property
    def backend_type(self) -> str:
        return "memory"

    @property
    def records(self) -> dict[str, str]:
        """Copy of the stored records."""
        return dict(self._records)

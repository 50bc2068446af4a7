"""Persistence adapter for the chat session.

Best-effort durable round-trip of the message log through a ChatHistoryStore.
Reads happen once when the session opens; writes are scheduled as background
tasks chained in call order, so a mutation never waits for storage and a
storage failure never reaches the user. Failures are logged and absorbed.

Persisted record format:
    {"version": 1, "messages": [{"id", "content", "role", "timestamp"}, ...]}

A bare JSON list of messages (the browser widget's format) is also accepted.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import ValidationError

from ..memory import ChatHistoryStore
from .config import HISTORY_FORMAT_VERSION, STORAGE_KEY
from .models import Message

logger = logging.getLogger(__name__)


def encode_history(messages: Sequence[Message]) -> str:
    """Serialize the log into the versioned JSON envelope."""
    return json.dumps({
        "version": HISTORY_FORMAT_VERSION,
        "messages": [message.model_dump(mode="json") for message in messages],
    }, ensure_ascii=False)


def decode_history(raw: str) -> list[Message]:
    """Parse a persisted record back into messages.

    Entries that fail validation are dropped individually. A record that is
    not JSON raises ``json.JSONDecodeError`` (``RecursionError`` if it nests
    too deeply to parse); an unknown shape yields an empty list.
    """
    data: Any = json.loads(raw)

    if isinstance(data, dict):
        version = data.get("version")
        if version != HISTORY_FORMAT_VERSION:
            logger.info("Reading chat history with format version %r", version)
        entries = data.get("messages")
    else:
        entries = data

    if not isinstance(entries, list):
        logger.warning("Ignoring chat history with unexpected shape: %s", type(entries).__name__)
        return []

    messages: list[Message] = []
    for index, entry in enumerate(entries):
        try:
            messages.append(Message.model_validate(entry))
        except ValidationError as e:
            logger.warning(
                "Dropping malformed chat history entry %d (%d error(s))",
                index,
                e.error_count(),
            )
    return messages


class HistoryPersistence:
    """Mirrors the session's message log to a history store.

    Usage:
        persistence = HistoryPersistence(store)
        messages = await persistence.load()
        persistence.save(messages)      # returns immediately
        await persistence.flush()       # wait for scheduled writes
    """

    def __init__(self, store: ChatHistoryStore, key: str = STORAGE_KEY):
        self._store = store
        self._key = key
        self._tail: asyncio.Task | None = None

    @property
    def store(self) -> ChatHistoryStore:
        return self._store

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[Message]:
        """Read the persisted log; any failure is treated as empty history."""
        try:
            raw = await self._store.read(self._key)
        except Exception:
            logger.warning("Error loading chat history", exc_info=True)
            return []

        if raw is None:
            return []

        try:
            messages = decode_history(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.warning("Stored chat history is unreadable: %s", e)
            return []

        logger.debug("Loaded %d message(s) from %s", len(messages), self._store.backend_type)
        return messages

    def save(self, messages: Sequence[Message]) -> None:
        """Schedule a write of the full log. Never raises."""
        payload = encode_history(messages)
        self._schedule(lambda: self._store.write(self._key, payload), "saving")

    def erase(self) -> None:
        """Schedule removal of the persisted record. Never raises."""
        self._schedule(lambda: self._store.delete(self._key), "clearing")

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._tail is not None and not self._tail.done():
            await asyncio.wait({self._tail})

    def _schedule(self, operation: Callable[[], Awaitable[None]], action: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Error %s chat history: no running event loop", action)
            return

        previous = self._tail

        async def run() -> None:
            if previous is not None and not previous.done():
                await asyncio.wait({previous})
            try:
                await operation()
            except Exception:
                logger.warning("Error %s chat history", action, exc_info=True)

        self._tail = loop.create_task(run())

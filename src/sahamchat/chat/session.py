"""Request lifecycle controller for the chat assistant.

ChatSession owns one SessionStateStore, at most one outstanding completion
request and the persistence adapter. It is the surface the widget talks to:
a read-only state view plus the send / clear / toggle / close / dismiss
actions.

Each completion runs as an asyncio.Task which doubles as the cancellation
handle. Only the task that is still "current" when it finishes may touch the
store; a superseded or torn-down request is cancelled and, should its client
return anyway, its result is dropped.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from ..llm.base import CompletionClient
from ..llm.errors import EMPTY_REPLY_MESSAGE, CompletionError
from ..memory import ChatHistoryStore
from .config import STORAGE_KEY, UNKNOWN_ERROR_MESSAGE
from .models import Message, SessionState
from .persistence import HistoryPersistence
from .store import SessionStateStore, StateListener

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Turn a completion failure into the text shown to the user."""
    if isinstance(error, CompletionError):
        return error.message or UNKNOWN_ERROR_MESSAGE
    return str(error).strip() or UNKNOWN_ERROR_MESSAGE


class ChatSession:
    """One widget's conversation with the assistant.

    Usage:
        async with await ChatSession.open(client, history_store) as session:
            task = session.send_message("Apa itu IHSG?")
            await task
            print(session.messages[-1].content)
    """

    def __init__(
        self,
        client: CompletionClient,
        persistence: HistoryPersistence | None = None,
        messages: Sequence[Message] = (),
    ) -> None:
        self._client = client
        self._persistence = persistence
        self._store = SessionStateStore(
            messages,
            on_messages_changed=self._persist if persistence is not None else None,
        )
        self._current: asyncio.Task | None = None
        self._pending_message_id: str | None = None
        self._closed = False

    @classmethod
    async def open(
        cls,
        client: CompletionClient,
        history_store: ChatHistoryStore | None = None,
        key: str = STORAGE_KEY,
    ) -> "ChatSession":
        """Create a session and rehydrate its log from storage.

        The history store must already be connected. Unreadable history
        loads as an empty conversation.
        """
        persistence = HistoryPersistence(history_store, key) if history_store is not None else None
        session = cls(client, persistence)
        if persistence is not None:
            session._store.hydrate(await persistence.load())
        return session

    # -- read-only view -------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._store.state

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._store.messages

    @property
    def is_loading(self) -> bool:
        return self._store.is_loading

    @property
    def is_open(self) -> bool:
        return self._store.is_open

    @property
    def error(self) -> str | None:
        return self._store.error

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Receive a SessionState snapshot after every change."""
        return self._store.subscribe(listener)

    # -- actions ----------------------------------------------------------

    def send_message(self, text: str, *, supersede: bool = False) -> asyncio.Task | None:
        """Append the user's message and request a reply in the background.

        Must be called from a running event loop. The user message is in the
        log when this returns; the returned task resolves to the assistant
        Message, or None if the request failed (see ``error``).

        Args:
            text: User input; surrounding whitespace is trimmed
            supersede: Abandon an outstanding request instead of ignoring
                this call. The abandoned prompt is removed from the log
                without an error.

        Returns:
            The completion task, or None if the input was rejected
        """
        if self._closed or not text.strip():
            return None
        if self._store.is_loading and not supersede:
            logger.debug("Ignoring send while a reply is pending")
            return None

        loop = asyncio.get_running_loop()

        if self._current is not None:
            self._cancel_current(retract=True)

        message = self._store.append_user_message(text)
        if message is None:
            return None

        task = loop.create_task(self._complete(message.id, self._store.messages))
        self._current = task
        self._pending_message_id = message.id
        return task

    async def ask(self, text: str) -> Message | None:
        """Send a message and wait for the reply.

        Returns:
            The assistant message, or None if the input was rejected or the
            request failed
        """
        task = self.send_message(text)
        if task is None:
            return None
        return await task

    def clear_chat(self) -> None:
        """Drop the conversation, its error and its persisted record."""
        if self._closed:
            return
        if self._current is not None:
            self._cancel_current(retract=False)
        self._store.clear()
        if self._persistence is not None:
            self._persistence.erase()

    def toggle_chat(self) -> None:
        if not self._closed:
            self._store.toggle_open()

    def close_chat(self) -> None:
        if not self._closed:
            self._store.close()

    def clear_error(self) -> None:
        if not self._closed:
            self._store.clear_error()

    # -- lifecycle --------------------------------------------------------

    async def flush(self) -> None:
        """Wait for scheduled history writes."""
        if self._persistence is not None:
            await self._persistence.flush()

    async def aclose(self) -> None:
        """Tear the session down.

        Cancels the outstanding request and waits for pending history writes.
        The prompt of a cancelled request is left out of the stored history so
        it does not reappear unanswered. Nothing mutates the session
        afterwards, however late a reply arrives.
        """
        if self._closed:
            return
        self._closed = True
        if self._current is not None:
            pending_id = self._pending_message_id
            self._cancel_current(retract=False)
            messages = self._store.messages
            if self._persistence is not None and messages and messages[-1].id == pending_id:
                self._persistence.save(messages[:-1])
        await self.flush()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # -- internals --------------------------------------------------------

    def _persist(self, messages: tuple[Message, ...]) -> None:
        self._persistence.save(messages)

    def _is_current(self, task: asyncio.Task | None) -> bool:
        return not self._closed and task is not None and self._current is task

    def _release(self) -> None:
        self._current = None
        self._pending_message_id = None

    def _cancel_current(self, retract: bool) -> None:
        task = self._current
        message_id = self._pending_message_id
        self._release()
        task.cancel()
        if retract and message_id is not None and self._store.is_loading:
            self._store.rollback_last_message(None, message_id=message_id)

    async def _complete(self, message_id: str, conversation: tuple[Message, ...]) -> Message | None:
        task = asyncio.current_task()
        try:
            reply = await self._client.complete(conversation)
            if not isinstance(reply, str) or not reply.strip():
                raise CompletionError(EMPTY_REPLY_MESSAGE)
        except asyncio.CancelledError:
            logger.debug("Completion for %s cancelled", message_id)
            raise
        except Exception as e:
            if not self._is_current(task):
                logger.debug("Discarding failure of abandoned request %s: %s", message_id, e)
                return None
            logger.warning("Error sending message: %s", e)
            self._release()
            self._store.rollback_last_message(describe_error(e), message_id=message_id)
            return None

        if not self._is_current(task):
            logger.debug("Discarding late reply for abandoned request %s", message_id)
            return None

        self._release()
        return self._store.append_assistant_message(reply)

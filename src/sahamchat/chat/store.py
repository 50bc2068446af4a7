"""Session State Store.

Holds the message log, loading flag, visibility flag and last error, and
accepts only the mutation operations defined here. Every mutation publishes
a fresh SessionState snapshot to subscribers; changes to the message log are
additionally reported to the log-change hook (used for persistence).
"""

import logging
from collections.abc import Callable, Iterable

from .models import Message, Role, SessionState

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]
MessagesHook = Callable[[tuple[Message, ...]], None]


class SessionStateStore:
    """Single source of truth for one chat session."""

    def __init__(
        self,
        messages: Iterable[Message] = (),
        on_messages_changed: MessagesHook | None = None,
    ) -> None:
        self._state = SessionState(messages=tuple(messages))
        self._on_messages_changed = on_messages_changed
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._state.messages

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def error(self) -> str | None:
        return self._state.error

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a snapshot listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def hydrate(self, messages: Iterable[Message]) -> None:
        """Replace the log with previously persisted history.

        Does not report a log change, the history came from storage.
        """
        self._commit(messages=tuple(messages), persist=False)

    def append_user_message(self, text: str) -> Message | None:
        """Append a user message and enter the loading state.

        Returns None without touching state if the trimmed text is empty or a
        send is already in progress.
        """
        content = text.strip()
        if not content or self._state.is_loading:
            return None

        message = Message.create(Role.USER, content)
        self._commit(
            messages=(*self._state.messages, message),
            is_loading=True,
            error=None,
        )
        return message

    def append_assistant_message(self, text: str) -> Message:
        """Append the assistant reply and leave the loading state."""
        message = Message.create(Role.ASSISTANT, text)
        self._commit(
            messages=(*self._state.messages, message),
            is_loading=False,
        )
        return message

    def rollback_last_message(
        self,
        error_text: str | None,
        message_id: str | None = None,
    ) -> Message | None:
        """Remove the speculatively appended user message of a failed send.

        Args:
            error_text: Failure shown to the user, None for a silent retraction
            message_id: Only remove the last message if it has this id

        Returns:
            The removed message, or None if nothing was removed
        """
        messages = self._state.messages
        removed: Message | None = None
        if messages and (message_id is None or messages[-1].id == message_id):
            removed = messages[-1]
            messages = messages[:-1]
        elif message_id is not None:
            logger.debug("Rollback target %s is no longer the last message", message_id)

        self._commit(
            messages=messages,
            is_loading=False,
            error=error_text,
            persist=removed is not None,
        )
        return removed

    def clear(self) -> None:
        """Empty the log and drop the error. Visibility is kept."""
        self._commit(messages=(), is_loading=False, error=None, persist=False)

    def toggle_open(self) -> None:
        self._commit(is_open=not self._state.is_open, error=None)

    def close(self) -> None:
        self._commit(is_open=False)

    def clear_error(self) -> None:
        self._commit(error=None)

    def _commit(self, persist: bool = True, **changes) -> None:
        previous = self._state
        # model_validate rather than model_copy so the loading/error rule is checked
        self._state = SessionState.model_validate({**dict(previous), **changes})

        if persist and "messages" in changes and self._on_messages_changed is not None:
            self._on_messages_changed(self._state.messages)

        for listener in list(self._listeners):
            listener(self._state)

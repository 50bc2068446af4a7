"""Custom Textual widgets for the chat panel.

Hides widget implementation details:
- Input history management
- Chat message rendering
- Error banner and typing indicator display

Widgets never hold conversation state of their own; the app feeds them
SessionState snapshots.
"""

from collections.abc import Sequence

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Input, Static

from ..chat.models import Message, Role
from .config import (
    ASSISTANT_NAME,
    BRAND_NAME,
    CLEAR_TOOLTIP,
    DISMISS_LABEL,
    INPUT_HISTORY_MAX_SIZE,
    INPUT_PLACEHOLDER,
    MESSAGE_TIME_FORMAT,
    TYPING_INDICATOR,
    WELCOME_MESSAGE,
)


class HistoryInput(Input):
    """Input widget with command history support.

    Use Up/Down arrow keys to navigate through previously sent prompts.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._current_input: str = ""

    def _on_key(self, event) -> None:
        """Handle key events for history navigation."""
        if event.key == "up":
            if self._history:
                if self._history_index == -1:
                    self._current_input = self.value
                    self._history_index = len(self._history) - 1
                elif self._history_index > 0:
                    self._history_index -= 1
                self.value = self._history[self._history_index]
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()
        elif event.key == "down":
            if self._history_index != -1:
                if self._history_index < len(self._history) - 1:
                    self._history_index += 1
                    self.value = self._history[self._history_index]
                else:
                    self._history_index = -1
                    self.value = self._current_input
                self.cursor_position = len(self.value)
            event.prevent_default()
            event.stop()

    def add_to_history(self, command: str) -> None:
        """Add a prompt to history."""
        if command and (not self._history or self._history[-1] != command):
            self._history.append(command)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self._current_input = ""


class ChatHeader(Horizontal):
    """Panel header with the assistant's name and the panel controls."""

    def compose(self):
        with Vertical(id="header-titles"):
            yield Static(ASSISTANT_NAME, id="header-title")
            yield Static(BRAND_NAME, id="header-subtitle")
        yield Button("🗑", id="clear-btn").with_tooltip(CLEAR_TOOLTIP)
        yield Button("—", id="minimize-btn").with_tooltip("Minimize")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation log.

    Shows the welcome message while the log is empty and a typing
    indicator while a reply is pending.
    """

    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered: tuple[tuple[str, ...], bool] | None = None

    def show_messages(self, messages: Sequence[Message], is_loading: bool) -> None:
        """Re-render the log if it differs from what is on screen."""
        key = (tuple(message.id for message in messages), is_loading)
        if key == self._rendered:
            return
        self._rendered = key

        self.remove_children()
        if messages:
            self.mount_all(self._render_message(message) for message in messages)
        else:
            self.mount(self._render_welcome())
        if is_loading:
            self.mount(Static(f"{ASSISTANT_NAME}: {TYPING_INDICATOR}", classes="typing-indicator"))
        self.scroll_end(animate=False)

    def _render_message(self, message: Message) -> Vertical:
        if message.role == Role.USER:
            css_class = "chat-message user-message"
        else:
            css_class = "chat-message assistant-message"

        local_time = message.timestamp.astimezone().strftime(MESSAGE_TIME_FORMAT)
        return Vertical(
            Static(message.content, classes="message-content", markup=False),
            Static(local_time, classes="message-time"),
            classes=css_class,
        )

    def _render_welcome(self) -> Vertical:
        return Vertical(
            Static(WELCOME_MESSAGE, classes="message-content", markup=False),
            classes="chat-message assistant-message welcome-message",
        )


class ErrorBanner(Horizontal):
    """Dismissible banner showing the last completion failure."""

    class Dismissed(TextualMessage):
        """Posted when the user closes the banner."""

    def compose(self):
        yield Static("", id="error-text", markup=False)
        yield Button(DISMISS_LABEL, id="dismiss-error-btn", variant="error")

    def on_mount(self) -> None:
        self.display = False

    def show_error(self, error: str | None) -> None:
        """Show the error text, or hide the banner when there is none."""
        if error:
            self.query_one("#error-text", Static).update(error)
            self.display = True
        else:
            self.display = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "dismiss-error-btn":
            event.stop()
            self.post_message(self.Dismissed())


class ChatInputBar(Horizontal):
    """Single-line prompt input with Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield HistoryInput(placeholder=INPUT_PLACEHOLDER, id="chat-input")
        yield Button("Kirim", id="send-btn", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def set_busy(self, busy: bool) -> None:
        """Disable input while a reply is pending."""
        self.query_one("#chat-input", HistoryInput).disabled = busy
        self.query_one("#send-btn", Button).disabled = busy

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", HistoryInput).focus()

    def _submit(self) -> None:
        text_input = self.query_one("#chat-input", HistoryInput)
        value = text_input.value.strip()
        if not value or text_input.disabled:
            return
        text_input.add_to_history(value)
        text_input.value = ""
        self.post_message(self.Submitted(value))

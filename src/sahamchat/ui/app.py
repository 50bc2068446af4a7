"""Main Textual TUI application.

Hosts one ChatSession and renders it: a toggle button that opens the chat
panel, the conversation, a typing indicator, an error banner and the prompt
input. All state lives in the session; the app only forwards user actions
and redraws from SessionState snapshots.
"""

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Static

from ..chat import ChatSession, Role, SessionState
from ..llm import CompletionClient
from ..memory import ChatHistoryStore
from .config import CLEAR_CONFIRM_PROMPT, TIPS_TEXT, TOGGLE_LABEL_CLOSED, TOGGLE_LABEL_OPEN
from .screens import ConfirmationScreen
from .styles import APP_CSS
from .themes import SAHAM_CERDAS
from .widgets import ChatHeader, ChatHistoryWidget, ChatInputBar, ErrorBanner

logger = logging.getLogger(__name__)


class ChatbotApp(App):
    """Textual TUI for the Saham Cerdas assistant widget."""

    CSS = APP_CSS
    TITLE = "Saham Cerdas AI"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+t", "toggle_chat", "Chat"),
        Binding("escape", "close_chat", "Minimize"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
    ]

    def __init__(
        self,
        client: CompletionClient,
        history_store: ChatHistoryStore | None = None,
        start_open: bool = True,
    ) -> None:
        super().__init__()
        self._client = client
        self._history_store = history_store
        self._start_open = start_open
        self._session: ChatSession | None = None
        self._unsubscribe = None

    @property
    def session(self) -> ChatSession | None:
        return self._session

    def compose(self) -> ComposeResult:
        with Vertical(id="chat-panel"):
            yield ChatHeader(id="chat-header")
            yield ChatHistoryWidget(id="chat-history")
            yield ErrorBanner(id="error-banner")
            yield ChatInputBar(id="chat-input-bar")
            yield Static(TIPS_TEXT, id="chat-tips")
        with Horizontal(id="toggle-bar"):
            yield Button(TOGGLE_LABEL_CLOSED, id="chat-toggle")
        yield Footer()

    async def on_mount(self) -> None:
        """Open the session, rehydrating history before any send."""
        self.register_theme(SAHAM_CERDAS)
        self.theme = "saham-cerdas"

        self._session = await ChatSession.open(self._client, self._history_store)
        self._unsubscribe = self._session.subscribe(self._render_state)
        if self._start_open and not self._session.is_open:
            self._session.toggle_chat()
        else:
            self._render_state(self._session.state)

    async def on_unmount(self) -> None:
        """Cancel any pending request and flush history writes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._session is not None:
            await self._session.aclose()

    def _render_state(self, state: SessionState) -> None:
        panel = self.query_one("#chat-panel", Vertical)
        panel.display = state.is_open

        toggle = self.query_one("#chat-toggle", Button)
        toggle.label = TOGGLE_LABEL_OPEN if state.is_open else TOGGLE_LABEL_CLOSED
        toggle.set_class(state.is_open, "-open")

        self.query_one("#chat-history", ChatHistoryWidget).show_messages(
            state.messages, state.is_loading
        )
        self.query_one("#error-banner", ErrorBanner).show_error(state.error)

        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_busy(state.is_loading)
        if state.is_open and not state.is_loading:
            input_bar.focus_input()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session is not None:
            self._session.send_message(event.value)

    def on_error_banner_dismissed(self, event: ErrorBanner.Dismissed) -> None:
        if self._session is not None:
            self._session.clear_error()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "chat-toggle":
            self.action_toggle_chat()
        elif button_id == "minimize-btn":
            self.action_close_chat()
        elif button_id == "clear-btn":
            self.action_clear_chat()

    def action_toggle_chat(self) -> None:
        if self._session is not None:
            self._session.toggle_chat()

    def action_close_chat(self) -> None:
        if self._session is not None:
            self._session.close_chat()

    def action_clear_chat(self) -> None:
        """Ask for confirmation, then clear the conversation."""
        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed and self._session is not None:
                self._session.clear_chat()
                self.notify("Chat cleared", timeout=2)

        self.push_screen(ConfirmationScreen(CLEAR_CONFIRM_PROMPT), _on_confirm)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        if self._session is None:
            return
        for message in reversed(self._session.messages):
            if message.role == Role.ASSISTANT:
                self.copy_to_clipboard(message.content)
                self.notify("Response copied")
                return
        self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    client: CompletionClient,
    history_store: ChatHistoryStore | None = None,
    start_open: bool = True,
) -> None:
    """Run the Textual TUI.

    Args:
        client: Completion client answering the user
        history_store: Connected history backend, None for session-only history
        start_open: Open the chat panel on start
    """
    app = ChatbotApp(client=client, history_store=history_store, start_open=start_open)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.debug("TUI interrupted")

"""Modal screens for the TUI.

Only one dialog exists: the "clear history" confirmation, worded and styled
like the web widget's confirm() prompt.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Grid
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from .config import CONFIRM_NO_LABEL, CONFIRM_YES_LABEL


class ConfirmationScreen(ModalScreen[bool]):
    """Ask a yes/no question; the screen result is True only for "Ya"."""

    DEFAULT_CSS = """
    ConfirmationScreen {
        align: center middle;
        background: $background 60%;
    }

    ConfirmationScreen > Grid {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: auto 3;
        width: 46;
        height: auto;
        padding: 1 2;
        border: thick $primary;
        background: $surface;
    }

    ConfirmationScreen #question {
        column-span: 2;
        width: 100%;
        content-align: center middle;
        text-style: bold;
    }

    ConfirmationScreen Button {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("y", "answer(True)", CONFIRM_YES_LABEL, show=False),
        Binding("n,escape", "answer(False)", CONFIRM_NO_LABEL, show=False),
    ]

    def __init__(self, question: str) -> None:
        super().__init__()
        self._question = question

    def compose(self) -> ComposeResult:
        with Grid():
            with Center(id="question"):
                yield Label(self._question)
            yield Button(CONFIRM_YES_LABEL, id="confirm-yes", variant="error")
            yield Button(CONFIRM_NO_LABEL, id="confirm-no", variant="default")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, confirmed: bool) -> None:
        self.dismiss(confirmed)

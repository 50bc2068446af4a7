"""Terminal UI module for sahamchat.

Provides a Textual-based version of the assistant widget.

Module structure (each module hides a design decision):
- config.py: Widget texts and display constants
- widgets.py: Custom widgets (history, input, error banner, header)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- screens.py: Modal dialogs (confirmation screens)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatbotApp, run_textual_tui
from .widgets import ChatHistoryWidget, ChatInputBar, ErrorBanner

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatbotApp",
    "ErrorBanner",
    "run_textual_tui",
]

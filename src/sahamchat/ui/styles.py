"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
The widget mirrors the web assistant: a floating toggle button in the
bottom-right corner and a chat panel that opens above it.
"""

APP_CSS = """
Screen {
    background: $background;
    layers: base overlay;
}

/* ============================================
   Toggle Button - bottom right corner
   ============================================ */
#toggle-bar {
    dock: bottom;
    height: 3;
    align: right middle;
    padding: 0 2 0 0;
    layer: overlay;
}

#chat-toggle {
    width: 14;
    background: $primary;
    color: $foreground;
    text-style: bold;

    &.-open {
        background: $panel;
    }
}

/* ============================================
   Chat Panel
   ============================================ */
#chat-panel {
    dock: right;
    width: 60;
    height: 1fr;
    margin: 1 2 5 0;
    layer: overlay;
    background: $surface;
    border: round $primary 60%;

    &:focus-within {
        border: round $primary;
    }
}

/* Header: assistant name + brand, clear and minimize buttons */
ChatHeader {
    height: 3;
    background: $primary;
    padding: 0 1;

    & #header-titles {
        width: 1fr;
    }

    & #header-title {
        text-style: bold;
    }

    & #header-subtitle {
        color: $foreground 70%;
    }

    & Button {
        min-width: 5;
        width: 7;
        margin: 0 0 0 1;
        border: none;
        background: transparent;
    }
}

/* ============================================
   Chat History
   ============================================ */
#chat-history {
    height: 1fr;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.chat-message {
    width: 100%;
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    border-right: tall $primary;
    background: $primary 20%;
    text-align: right;

    & .message-time {
        color: $primary-lighten-2;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $panel;

    & .message-time {
        color: $text-muted;
    }
}

.welcome-message {
    border-left: tall $accent;
}

.message-content {
    height: auto;
}

.message-time {
    height: 1;
}

.typing-indicator {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    color: $text-muted;
    text-style: italic;
}

/* ============================================
   Error Banner
   ============================================ */
ErrorBanner {
    height: auto;
    padding: 0 1;
    margin: 0 1;
    background: $error 15%;
    border: round $error;

    & #error-text {
        width: 1fr;
        color: $text-error;
    }

    & Button {
        min-width: 8;
        border: none;
    }
}

/* ============================================
   Input Bar
   ============================================ */
ChatInputBar {
    height: 3;
    margin: 0 1;
}

#chat-input {
    width: 1fr;
}

#send-btn {
    width: 10;
    margin: 0 0 0 1;
    background: $primary;
    text-style: bold;
}

#chat-tips {
    height: 1;
    padding: 0 1;
    color: $text-muted;
}
"""

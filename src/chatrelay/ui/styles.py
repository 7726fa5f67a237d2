"""CSS styles for the chat TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

MessageBubble {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;

    &.user-message {
        border-left: thick $accent;
        background: $boost;
    }

    &.assistant-message {
        border-left: thick $success;
    }

    &.error-message {
        border-left: thick $error;
        color: $error;
    }

    .message-header {
        text-style: bold;
        color: $text-muted;
    }

    .attachment-badge {
        color: $warning;
        text-style: italic;
    }
}

#status-bar {
    height: 1;
    padding: 0 1;
    color: $text-muted;
}

#chat-input {
    border: tall $border;

    &:focus {
        border: tall $primary;
    }

    &:disabled {
        opacity: 60%;
    }
}
"""

"""Custom Textual widgets for the chat TUI.

Hides how visible messages are rendered and scrolled.
"""

from rich.text import Text
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

from ..client import VisibleMessage


class MessageBubble(Vertical):
    """One rendered chat message.

    Content is wrapped in rich Text so model output is shown literally and
    never interpreted as markup.
    """

    def __init__(self, message: VisibleMessage, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.message = message
        if message.is_error:
            self.add_class("error-message")
        else:
            self.add_class(f"{message.role}-message")

    def compose(self):
        timestamp = self.message.timestamp.strftime("%H:%M:%S")
        yield Static(
            Text(f"{self.message.role_label} [{timestamp}]"),
            classes="message-header",
        )
        if self.message.attachment_name:
            yield Static(
                Text(f"Attached: {self.message.attachment_name}"),
                classes="attachment-badge",
            )
        if self.message.content:
            yield Static(Text(self.message.content), classes="message-body")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable list of message bubbles."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._message_count = 0

    def add_message(self, message: VisibleMessage) -> None:
        """Append a message and keep the newest one in view."""
        self.mount(MessageBubble(message))
        self._message_count += 1
        self.border_subtitle = f"{self._message_count} messages"
        self.scroll_end(animate=False)

    def replace_messages(self, messages: list[VisibleMessage]) -> None:
        """Re-render the whole history, e.g. after resuming a conversation."""
        self.remove_children()
        self._message_count = 0
        for message in messages:
            self.add_message(message)

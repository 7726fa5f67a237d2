"""Terminal UI for chatrelay.

Module structure (each module hides a design decision):
- widgets.py: How visible messages are rendered and scrolled
- styles.py: CSS styling (layout decisions)
- screens.py: Modal dialogs (attach, passphrase, manual copy)
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatRelayApp, run_textual_tui
from .widgets import ChatHistoryWidget, MessageBubble

__all__ = [
    "ChatHistoryWidget",
    "ChatRelayApp",
    "MessageBubble",
    "run_textual_tui",
]

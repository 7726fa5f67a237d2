"""Conversation context assembly.

Builds the bounded prompt sent to the completion provider: the system
prompt followed by a fixed-size window of the most recent messages. The
window is a plain sliding cutoff; older messages are dropped silently.
"""

from collections.abc import Sequence

from .llm.models import ChatMessage
from .store.models import Message, Role


def assemble_context(
    history: Sequence[Message],
    system_prompt: str,
    window_size: int,
) -> list[ChatMessage]:
    """Build the provider context for the next turn.

    Args:
        history: Stored messages before the current user message
        system_prompt: Text of the leading system message
        window_size: Maximum number of history messages to include

    Returns:
        One system message followed by the last ``window_size`` history
        messages in chronological order

    Raises:
        ValueError: If window_size is not a positive integer
    """
    if window_size < 1:
        raise ValueError(f"window_size must be a positive integer, got {window_size}")

    window = history[-window_size:]
    return [
        ChatMessage(role=Role.SYSTEM.value, content=system_prompt),
        *(ChatMessage(role=message.role, content=message.content) for message in window),
    ]


class ContextAssembler:
    """Binds the configured system prompt and window size."""

    def __init__(self, system_prompt: str, window_size: int = 15):
        if window_size < 1:
            raise ValueError(f"window_size must be a positive integer, got {window_size}")
        self.system_prompt = system_prompt
        self.window_size = window_size

    def assemble(self, history: Sequence[Message]) -> list[ChatMessage]:
        return assemble_context(history, self.system_prompt, self.window_size)

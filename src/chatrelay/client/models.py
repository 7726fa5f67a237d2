"""Data models for the client session.

Hides the internal representation of visible chat messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class SessionState(str, Enum):
    """Lifecycle of a client session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SENDING = "sending"


@dataclass(frozen=True)
class VisibleMessage:
    """A message as rendered to the user."""

    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    attachment_name: str | None = None
    is_error: bool = False

    @property
    def role_label(self) -> str:
        return self.role.capitalize()

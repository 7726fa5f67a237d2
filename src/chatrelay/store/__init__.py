"""Conversation store module for chatrelay.

Provides durable, append-only conversation records.
"""

from .base import ConversationStore
from .factory import create_conversation_store
from .models import Conversation, Message, Role

__all__ = [
    "Conversation",
    "ConversationStore",
    "Message",
    "Role",
    "create_conversation_store",
]

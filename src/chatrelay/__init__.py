"""
chatrelay: a minimal LLM chat relay.

A client collects user messages, the server persists the conversation and
forwards a bounded window of it to a completion provider, then relays the
reply back.
"""

__version__ = "0.1.0"

from .context import ContextAssembler, assemble_context
from .service import ConversationService
from .store import Conversation, ConversationStore, Message, Role, create_conversation_store

__all__ = [
    "ContextAssembler",
    "Conversation",
    "ConversationService",
    "ConversationStore",
    "Message",
    "Role",
    "assemble_context",
    "create_conversation_store",
]

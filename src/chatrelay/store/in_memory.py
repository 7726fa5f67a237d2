"""In-memory conversation store.

Simple dict-based storage for a single process.
Data is lost when the application exits.
"""

from ..errors import StoreError
from .base import ConversationStore
from .models import Conversation


class InMemoryConversationStore(ConversationStore):
    """In-memory conversation store (process lifetime only).

    Suitable for development and testing.
    """

    def __init__(self):
        self._conversations: dict[str, Conversation] = {}

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def create_conversation(self) -> Conversation:
        conversation = Conversation()
        self._conversations[conversation.id] = conversation
        return conversation

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None
        # Hand out a copy so callers cannot mutate stored state
        return conversation.model_copy(deep=True)

    async def save_conversation(self, conversation: Conversation) -> None:
        if conversation.id not in self._conversations:
            raise StoreError(f"Conversation {conversation.id} does not exist")
        self._conversations[conversation.id] = conversation.model_copy(deep=True)

    @property
    def backend_type(self) -> str:
        return "memory"

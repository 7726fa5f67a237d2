"""Abstract base class for conversation stores.

The store is treated as an opaque document store reached through a
create/read/update interface. The abstraction hides:
- Storage format (rows, documents, in-process objects)
- Persistence mechanism (file, database, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod

from .models import Conversation


class ConversationStore(ABC):
    """Abstract conversation store.

    Every turn reads the whole record, then writes it back. There is no
    optimistic concurrency control: the last write wins.

    Backends raise StoreError when the underlying engine fails.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store backend gracefully."""

    @abstractmethod
    async def create_conversation(self) -> Conversation:
        """Create and persist an empty conversation."""

    @abstractmethod
    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Read a conversation, or None if the id is unknown."""

    @abstractmethod
    async def save_conversation(self, conversation: Conversation) -> None:
        """Replace the stored message list of an existing conversation."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "ConversationStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

"""Factory for creating conversation stores."""

from typing import Any

from .base import ConversationStore

SQLITE_PREFIX = "sqlite:///"
MONGODB_PREFIXES = ("mongodb://", "mongodb+srv://")


def create_conversation_store(url: str = "memory://", **kwargs: Any) -> ConversationStore:
    """Create a conversation store from a connection string.

    Args:
        url: "memory://", "sqlite:///path/to/file.db",
            "mongodb://..." or "mongodb+srv://..."
        **kwargs: Backend-specific configuration

    Returns:
        ConversationStore instance (not yet connected)

    Raises:
        ValueError: If the URL scheme is not supported
    """
    if url in ("memory", "memory://"):
        from .in_memory import InMemoryConversationStore
        return InMemoryConversationStore(**kwargs)

    if url.startswith(SQLITE_PREFIX):
        from .sqlite import SQLiteConversationStore
        path = url[len(SQLITE_PREFIX):]
        if not path:
            raise ValueError("SQLite store URL needs a file path: sqlite:///path/to.db")
        return SQLiteConversationStore(path=path, **kwargs)

    if url.startswith(MONGODB_PREFIXES):
        from .mongodb import MongoConversationStore
        return MongoConversationStore(connection_string=url, **kwargs)

    raise ValueError(
        f"Unsupported store URL: {url!r}. "
        f"Supported schemes: memory://, sqlite:///, mongodb://, mongodb+srv://"
    )

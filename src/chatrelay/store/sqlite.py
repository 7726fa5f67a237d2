"""SQLite conversation store.

Provides persistent conversation storage using a SQLite database file.
Uses aiosqlite for async access.
"""

from datetime import datetime
from pathlib import Path

import aiosqlite

from ..errors import StoreError
from ..logger import get_logger
from .base import ConversationStore
from .models import Conversation, Message, utcnow

logger = get_logger(__name__)


class SQLiteConversationStore(ConversationStore):
    """SQLite-backed conversation store.

    Conversations and messages live in two tables; message order is kept
    in an explicit position column.
    """

    def __init__(self, path: str | Path = "./chatrelay.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database and create the schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path)
            await self._connection.execute("PRAGMA foreign_keys = ON")
            await self._create_schema()
        except (aiosqlite.Error, OSError) as e:
            raise StoreError(f"Failed to open SQLite store at {self._db_path}: {e}") from e
        logger.info("Connected to SQLite store", path=str(self._db_path))

    async def _create_schema(self) -> None:
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS conversations (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                conversation_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                role TEXT NOT NULL,
                content TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY (conversation_id) REFERENCES conversations(id) ON DELETE CASCADE
            )
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_messages_conversation
            ON messages(conversation_id, position)
        """)

        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StoreError("SQLite store is not connected")
        return self._connection

    async def create_conversation(self) -> Conversation:
        conn = self._require_connection()
        conversation = Conversation()
        try:
            await conn.execute(
                "INSERT INTO conversations (id, created_at, updated_at) VALUES (?, ?, ?)",
                (
                    conversation.id,
                    conversation.created_at.isoformat(),
                    conversation.updated_at.isoformat(),
                ),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create conversation: {e}") from e
        return conversation

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conn = self._require_connection()
        try:
            async with conn.execute(
                "SELECT id, created_at, updated_at FROM conversations WHERE id = ?",
                (conversation_id,)
            ) as cursor:
                row = await cursor.fetchone()

            if row is None:
                return None

            _, created_at, updated_at = row

            async with conn.execute(
                """
                SELECT role, content, created_at
                FROM messages
                WHERE conversation_id = ?
                ORDER BY position ASC
                """,
                (conversation_id,)
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read conversation {conversation_id}: {e}") from e

        messages = [
            Message(role=role, content=content, created_at=datetime.fromisoformat(ts))
            for role, content, ts in rows
        ]

        return Conversation(
            id=conversation_id,
            messages=messages,
            created_at=datetime.fromisoformat(created_at),
            updated_at=datetime.fromisoformat(updated_at),
        )

    async def save_conversation(self, conversation: Conversation) -> None:
        """Rewrite the message list of a conversation in one transaction."""
        conn = self._require_connection()
        try:
            cursor = await conn.execute(
                "UPDATE conversations SET updated_at = ? WHERE id = ?",
                (utcnow().isoformat(), conversation.id)
            )
            if cursor.rowcount == 0:
                await conn.rollback()
                raise StoreError(f"Conversation {conversation.id} does not exist")

            await conn.execute(
                "DELETE FROM messages WHERE conversation_id = ?",
                (conversation.id,)
            )
            await conn.executemany(
                """
                INSERT INTO messages
                (conversation_id, position, role, content, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (
                        conversation.id,
                        position,
                        message.role,
                        message.content,
                        message.created_at.isoformat(),
                    )
                    for position, message in enumerate(conversation.messages)
                ],
            )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            raise StoreError(f"Failed to save conversation {conversation.id}: {e}") from e

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path

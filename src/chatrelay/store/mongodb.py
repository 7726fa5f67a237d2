"""MongoDB conversation store.

One document per conversation with an embedded message array
({role, content, timestamp}), keyed by the conversation id.
"""

from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from ..errors import StoreError
from ..logger import get_logger
from .base import ConversationStore
from .models import Conversation, Message, utcnow

logger = get_logger(__name__)


class MongoConversationStore(ConversationStore):
    """MongoDB-backed conversation store."""

    def __init__(
        self,
        connection_string: str,
        database_name: str = "chatrelay",
        collection_name: str = "conversations",
        **client_kwargs: Any
    ):
        self._connection_string = connection_string
        self._database_name = database_name
        self._collection_name = collection_name
        self._client_kwargs = client_kwargs
        self._client: AsyncMongoClient | None = None
        self._collection = None

    async def connect(self) -> None:
        """Connect and verify the server answers a ping."""
        try:
            self._client = AsyncMongoClient(
                self._connection_string,
                server_api=ServerApi("1"),
                tz_aware=True,
                **self._client_kwargs
            )
            await self._client.admin.command("ping")
            db = self._client.get_default_database(default=self._database_name)
            self._collection = db[self._collection_name]
        except PyMongoError as e:
            raise StoreError(f"MongoDB connection failed: {e}") from e
        logger.info("Connected to MongoDB", collection=self._collection_name)

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection = None

    def _require_collection(self):
        if self._collection is None:
            raise StoreError("MongoDB store is not connected")
        return self._collection

    @staticmethod
    def _to_document(conversation: Conversation) -> dict[str, Any]:
        return {
            "_id": conversation.id,
            "messages": [
                {
                    "role": message.role,
                    "content": message.content,
                    "timestamp": message.created_at,
                }
                for message in conversation.messages
            ],
            "created_at": conversation.created_at,
            "updated_at": conversation.updated_at,
        }

    @staticmethod
    def _from_document(document: dict[str, Any]) -> Conversation:
        return Conversation(
            id=document["_id"],
            messages=[
                Message(
                    role=item["role"],
                    content=item["content"],
                    created_at=item["timestamp"],
                )
                for item in document.get("messages", [])
            ],
            created_at=document["created_at"],
            updated_at=document["updated_at"],
        )

    async def create_conversation(self) -> Conversation:
        collection = self._require_collection()
        conversation = Conversation()
        try:
            await collection.insert_one(self._to_document(conversation))
        except PyMongoError as e:
            raise StoreError(f"Failed to create conversation: {e}") from e
        return conversation

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        collection = self._require_collection()
        try:
            document = await collection.find_one({"_id": conversation_id})
        except PyMongoError as e:
            raise StoreError(f"Failed to read conversation {conversation_id}: {e}") from e
        if document is None:
            return None
        return self._from_document(document)

    async def save_conversation(self, conversation: Conversation) -> None:
        collection = self._require_collection()
        document = self._to_document(conversation)
        try:
            result = await collection.update_one(
                {"_id": conversation.id},
                {"$set": {"messages": document["messages"], "updated_at": utcnow()}},
            )
        except PyMongoError as e:
            raise StoreError(f"Failed to save conversation {conversation.id}: {e}") from e
        if result.matched_count == 0:
            raise StoreError(f"Conversation {conversation.id} does not exist")

    @property
    def backend_type(self) -> str:
        return "mongodb"

"""Unit tests for the conversation store module."""
import os

import pytest

from chatrelay.errors import StoreError
from chatrelay.store import (
    Conversation,
    ConversationStore,
    Message,
    Role,
    create_conversation_store,
)
from chatrelay.store.in_memory import InMemoryConversationStore
from chatrelay.store.mongodb import MongoConversationStore
from chatrelay.store.sqlite import SQLiteConversationStore


class TestModels:
    """Tests for Message and Conversation models."""

    def test_new_conversation_is_empty(self):
        """Test that a conversation starts with no messages and an opaque id."""
        conversation = Conversation()

        assert conversation.messages == []
        assert conversation.id
        assert Conversation().id != conversation.id

    def test_message_requires_content(self):
        """Test that empty message content is rejected."""
        with pytest.raises(ValueError):
            Message(role=Role.USER, content="")

    def test_message_role_stored_as_string(self):
        """Test that roles serialize to their wire names."""
        message = Message(role=Role.ASSISTANT, content="hi")
        assert message.role == "assistant"

    def test_with_messages_appends_in_order(self):
        """Test that with_messages returns a new snapshot."""
        conversation = Conversation()
        first = Message(role=Role.USER, content="question")
        second = Message(role=Role.ASSISTANT, content="answer")

        updated = conversation.with_messages(first, second)

        assert [m.content for m in updated.messages] == ["question", "answer"]
        assert conversation.messages == []
        assert updated.id == conversation.id
        assert updated.updated_at >= conversation.updated_at


class TestConversationStore:
    """Tests for the ConversationStore interface."""

    def test_store_is_abstract(self):
        """Test that ConversationStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ConversationStore()  # type: ignore


class TestInMemoryStore:
    """Tests for InMemoryConversationStore."""

    async def test_create_and_get(self):
        """Test that a created conversation can be read back."""
        store = InMemoryConversationStore()
        created = await store.create_conversation()

        fetched = await store.get_conversation(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.messages == []

    async def test_get_unknown_returns_none(self):
        """Test that an unknown id is not an error at the store level."""
        store = InMemoryConversationStore()
        assert await store.get_conversation("missing") is None

    async def test_save_persists_messages(self):
        """Test that saved messages are visible on the next read."""
        store = InMemoryConversationStore()
        conversation = await store.create_conversation()

        await store.save_conversation(
            conversation.with_messages(Message(role=Role.USER, content="hi"))
        )

        fetched = await store.get_conversation(conversation.id)
        assert [m.content for m in fetched.messages] == ["hi"]

    async def test_returned_copies_are_isolated(self):
        """Test that mutating a fetched conversation does not touch the store."""
        store = InMemoryConversationStore()
        conversation = await store.create_conversation()

        fetched = await store.get_conversation(conversation.id)
        fetched.messages.append(Message(role=Role.USER, content="sneaky"))

        again = await store.get_conversation(conversation.id)
        assert again.messages == []

    async def test_save_unknown_raises(self):
        """Test that saving a conversation that was never created fails."""
        store = InMemoryConversationStore()
        with pytest.raises(StoreError):
            await store.save_conversation(Conversation())

    def test_backend_type(self):
        assert InMemoryConversationStore().backend_type == "memory"


class TestSQLiteStore:
    """Tests for SQLiteConversationStore."""

    async def test_round_trip_across_reconnect(self, tmp_path):
        """Test that messages survive closing and reopening the database."""
        db_path = tmp_path / "conversations.db"

        async with SQLiteConversationStore(db_path) as store:
            conversation = await store.create_conversation()
            await store.save_conversation(conversation.with_messages(
                Message(role=Role.USER, content="What is 2+2?"),
                Message(role=Role.ASSISTANT, content="4"),
            ))

        async with SQLiteConversationStore(db_path) as store:
            fetched = await store.get_conversation(conversation.id)

        assert fetched is not None
        assert [(m.role, m.content) for m in fetched.messages] == [
            ("user", "What is 2+2?"),
            ("assistant", "4"),
        ]

    async def test_save_replaces_message_list(self, tmp_path):
        """Test that each save writes the full message list in order."""
        async with SQLiteConversationStore(tmp_path / "c.db") as store:
            conversation = await store.create_conversation()
            first = conversation.with_messages(Message(role=Role.USER, content="one"))
            await store.save_conversation(first)
            await store.save_conversation(
                first.with_messages(Message(role=Role.ASSISTANT, content="two"))
            )

            fetched = await store.get_conversation(conversation.id)

        assert [m.content for m in fetched.messages] == ["one", "two"]

    async def test_get_unknown_returns_none(self, tmp_path):
        async with SQLiteConversationStore(tmp_path / "c.db") as store:
            assert await store.get_conversation("missing") is None

    async def test_save_unknown_raises(self, tmp_path):
        """Test that saving a conversation that was never created fails."""
        async with SQLiteConversationStore(tmp_path / "c.db") as store:
            with pytest.raises(StoreError):
                await store.save_conversation(Conversation())

    async def test_requires_connection(self, tmp_path):
        """Test that using the store before connect() raises StoreError."""
        store = SQLiteConversationStore(tmp_path / "c.db")
        with pytest.raises(StoreError):
            await store.create_conversation()


class TestStoreFactory:
    """Tests for create_conversation_store()."""

    @pytest.mark.parametrize("url", ["memory", "memory://"])
    def test_memory_urls(self, url: str):
        assert isinstance(create_conversation_store(url), InMemoryConversationStore)

    def test_default_is_memory(self):
        assert create_conversation_store().backend_type == "memory"

    def test_sqlite_url(self, tmp_path):
        """Test that the sqlite:/// prefix is stripped to a file path."""
        db_path = tmp_path / "chat.db"
        store = create_conversation_store(f"sqlite:///{db_path}")

        assert isinstance(store, SQLiteConversationStore)
        assert store.db_path == db_path

    def test_sqlite_url_without_path_fails(self):
        with pytest.raises(ValueError):
            create_conversation_store("sqlite:///")

    @pytest.mark.parametrize("url", [
        "mongodb://localhost:27017/chat",
        "mongodb+srv://user:pw@cluster.example.net/chat",
    ])
    def test_mongodb_urls(self, url: str):
        """Test that MongoDB URLs build a store without connecting."""
        store = create_conversation_store(url)
        assert isinstance(store, MongoConversationStore)
        assert store.backend_type == "mongodb"

    @pytest.mark.parametrize("url", ["postgres://localhost/db", "redis://", ""])
    def test_unsupported_url(self, url: str):
        with pytest.raises(ValueError, match="Unsupported store URL"):
            create_conversation_store(url)


@pytest.mark.integration
@pytest.mark.skipif(
    not os.getenv("MONGODB_TEST_URI"),
    reason="MONGODB_TEST_URI not set"
)
class TestMongoStore:
    """Integration tests for MongoConversationStore against a live server."""

    async def test_round_trip(self):
        async with MongoConversationStore(
            os.environ["MONGODB_TEST_URI"], database_name="chatrelay_test"
        ) as store:
            conversation = await store.create_conversation()
            await store.save_conversation(conversation.with_messages(
                Message(role=Role.USER, content="hi"),
                Message(role=Role.ASSISTANT, content="hello"),
            ))

            fetched = await store.get_conversation(conversation.id)

        assert [(m.role, m.content) for m in fetched.messages] == [
            ("user", "hi"),
            ("assistant", "hello"),
        ]

    async def test_save_unknown_raises(self):
        async with MongoConversationStore(
            os.environ["MONGODB_TEST_URI"], database_name="chatrelay_test"
        ) as store:
            with pytest.raises(StoreError):
                await store.save_conversation(Conversation())

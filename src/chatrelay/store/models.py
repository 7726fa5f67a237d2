"""Data models for the conversation store.

These models define the structure of conversations and their messages,
independent of the storage backend used.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """A single stored chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role = Field(description="Role of the message author")
    content: str = Field(min_length=1, description="Message text")
    created_at: datetime = Field(default_factory=utcnow)

    @field_serializer("created_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()


class Conversation(BaseModel):
    """A durable, append-only sequence of chat messages.

    Instances are snapshots: appending returns a new Conversation so a
    failed turn never leaves half-written state behind.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def with_messages(self, *messages: Message) -> "Conversation":
        """Return a copy with messages appended in the given order."""
        return self.model_copy(
            update={
                "messages": [*self.messages, *messages],
                "updated_at": utcnow(),
            }
        )

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to ISO format."""
        return value.isoformat()

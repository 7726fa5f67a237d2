from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..store.models import Message


class CreateConversationResponse(BaseModel):
    """Response for a newly created conversation."""

    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(serialization_alias="conversationId")


class MessageOut(BaseModel):
    """A stored message as returned to clients."""

    role: str
    content: str
    timestamp: datetime

    @classmethod
    def from_message(cls, message: Message) -> "MessageOut":
        return cls(role=message.role, content=message.content, timestamp=message.created_at)


class PostMessageRequest(BaseModel):
    """Body of a chat turn. Emptiness is checked by the service."""

    content: str | None = None


class PostMessageResponse(BaseModel):
    reply: str


class SessionRequest(BaseModel):
    passphrase: str = ""


class SessionResponse(BaseModel):
    token: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    store: str

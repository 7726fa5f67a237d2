"""Conversation orchestration.

One turn is: read the conversation, assemble context, call the completion
gateway, then persist the user and assistant messages together. Nothing
is written unless the gateway succeeded, so a failed turn never leaves an
unanswered user message behind.
"""

import asyncio
import weakref

from .context import ContextAssembler
from .errors import NotFoundError, ValidationError
from .llm.base import CompletionGateway
from .llm.models import ChatMessage
from .logger import get_logger
from .store.base import ConversationStore
from .store.models import Message, Role

logger = get_logger(__name__)


class ConversationService:
    """Create conversations and run chat turns against them.

    Turns on the same conversation are serialized within this process.
    Separate processes sharing a store still race with last-write-wins.
    """

    def __init__(
        self,
        store: ConversationStore,
        gateway: CompletionGateway,
        assembler: ContextAssembler,
    ):
        self._store = store
        self._gateway = gateway
        self._assembler = assembler
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    @property
    def store(self) -> ConversationStore:
        return self._store

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    async def create_conversation(self) -> str:
        """Create an empty conversation and return its id."""
        conversation = await self._store.create_conversation()
        logger.info("Conversation created", conversation_id=conversation.id)
        return conversation.id

    async def get_messages(self, conversation_id: str) -> list[Message]:
        """Return the stored messages of a conversation.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        conversation = await self._store.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        return conversation.messages

    async def post_message(self, conversation_id: str, text: str | None) -> str:
        """Run one chat turn and return the assistant reply.

        Raises:
            ValidationError: If text is missing or blank
            NotFoundError: If the conversation does not exist
            UpstreamError: If the completion provider call failed
            StoreError: If the conversation could not be read or written
        """
        if text is None or not text.strip():
            raise ValidationError("Missing message content")

        async with self._lock_for(conversation_id):
            conversation = await self._store.get_conversation(conversation_id)
            if conversation is None:
                raise NotFoundError(f"Conversation {conversation_id} not found")

            user_message = Message(role=Role.USER, content=text)
            context = self._assembler.assemble(conversation.messages)
            context.append(ChatMessage(role=user_message.role, content=user_message.content))

            logger.info(
                "Requesting completion",
                conversation_id=conversation_id,
                history_messages=len(conversation.messages),
                context_messages=len(context),
            )
            response = await self._gateway.complete(context)

            assistant_message = Message(role=Role.ASSISTANT, content=response.content)
            await self._store.save_conversation(
                conversation.with_messages(user_message, assistant_message)
            )

        logger.info(
            "Turn completed",
            conversation_id=conversation_id,
            model=response.model,
            usage=response.usage,
        )
        return response.content

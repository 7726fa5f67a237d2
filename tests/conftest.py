"""Pytest configuration and shared fixtures."""
from typing import Any

import pytest
from fastapi.testclient import TestClient

from chatrelay.api import create_app
from chatrelay.config import Settings
from chatrelay.context import ContextAssembler
from chatrelay.errors import UpstreamError
from chatrelay.llm import ChatMessage, CompletionGateway, LLMResponse
from chatrelay.service import ConversationService
from chatrelay.store.in_memory import InMemoryConversationStore

TEST_PASSPHRASE = "open sesame"


class FakeGateway(CompletionGateway):
    """Completion gateway that records requests and answers from a script."""

    def __init__(self, reply: str = "hello", error: UpstreamError | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[ChatMessage]] = []
        self.closed = False

    async def complete(self, messages: list[ChatMessage], **kwargs: Any) -> LLMResponse:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model="fake-model")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings():
    """Settings isolated from the developer's .env file."""
    return Settings(_env_file=None, llm_api_key="test-key")


@pytest.fixture
def gated_settings():
    """Settings with the passphrase gate enabled."""
    return Settings(_env_file=None, llm_api_key="test-key", access_passphrase=TEST_PASSPHRASE)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(error=UpstreamError("provider down", status_code=500, body="oops"))


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def service(store, gateway):
    return ConversationService(
        store=store,
        gateway=gateway,
        assembler=ContextAssembler("You are a helpful assistant.", window_size=15),
    )


@pytest.fixture
def app(settings, store, gateway):
    return create_app(settings, store=store, gateway=gateway)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def passphrase():
    return TEST_PASSPHRASE

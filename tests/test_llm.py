"""Unit tests for the completion gateway module."""
import json

import httpx
import pytest

from chatrelay.errors import UpstreamError
from chatrelay.llm import (
    PROVIDER_PRESETS,
    ChatMessage,
    CompletionGateway,
    OpenAICompatibleGateway,
    create_completion_gateway,
    parse_completion_response,
)

CHOICES_BODY = {
    "id": "chatcmpl-1",
    "model": "gpt-4o-mini",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "hello"}}],
    "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
}

LLAMA_BODY = {
    "id": "llama-1",
    "completion_message": {
        "role": "assistant",
        "content": {"type": "text", "text": "hi there"},
        "stop_reason": "stop",
    },
    "metrics": [
        {"metric": "num_prompt_tokens", "value": 12, "unit": "tokens"},
        {"metric": "num_completion_tokens", "value": 3, "unit": "tokens"},
        {"metric": "num_total_tokens", "value": 15, "unit": "tokens"},
    ],
}


def make_gateway(handler, **kwargs) -> OpenAICompatibleGateway:
    """Build a gateway whose HTTP traffic goes to handler."""
    return OpenAICompatibleGateway(
        api_key="secret-key",
        model="test-model",
        base_url="https://llm.example.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs
    )


class TestCompletionGateway:
    """Tests for CompletionGateway interface."""

    def test_gateway_is_abstract(self):
        """Test that CompletionGateway cannot be instantiated directly."""
        with pytest.raises(TypeError):
            CompletionGateway()  # type: ignore


class TestParseCompletionResponse:
    """Tests for decoding the two provider response shapes."""

    def test_choices_shape(self):
        response = parse_completion_response(CHOICES_BODY, model="fallback")

        assert response.content == "hello"
        assert response.model == "gpt-4o-mini"
        assert response.usage == {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6}

    def test_completion_message_shape(self):
        response = parse_completion_response(LLAMA_BODY, model="Llama-3.3-70B-Instruct")

        assert response.content == "hi there"
        assert response.model == "Llama-3.3-70B-Instruct"
        assert response.usage == {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15}

    def test_completion_message_without_metrics(self):
        body = {"completion_message": {"content": {"type": "text", "text": "ok"}}}
        assert parse_completion_response(body, model="m").usage is None

    @pytest.mark.parametrize("body", [
        {"result": "hello"},
        {"choices": []},
        {"completion_message": {"content": {"type": "image", "text": "x"}}},
        ["hello"],
        "hello",
    ])
    def test_unrecognized_shape(self, body):
        """Test that unknown bodies fail instead of yielding an empty reply."""
        with pytest.raises(UpstreamError, match="Unrecognized"):
            parse_completion_response(body, model="m")

    @pytest.mark.parametrize("body", [
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": "   "}}]},
        {"completion_message": {"content": {"type": "text", "text": ""}}},
    ])
    def test_empty_reply(self, body):
        with pytest.raises(UpstreamError, match="empty reply"):
            parse_completion_response(body, model="m")


class TestOpenAICompatibleGateway:
    """Tests for the HTTP behaviour of OpenAICompatibleGateway."""

    async def test_request_carries_credentials_model_and_messages(self):
        """Test the outgoing request: bearer key, model and message list."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=LLAMA_BODY)

        messages = [
            ChatMessage(role="system", content="Be brief."),
            ChatMessage(role="user", content="Hi"),
        ]
        async with make_gateway(handler) as gateway:
            response = await gateway.complete(messages)

        assert response.content == "hi there"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer secret-key"
        body = json.loads(request.content)
        assert body["model"] == "test-model"
        assert body["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
        ]

    async def test_choices_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=CHOICES_BODY)

        async with make_gateway(handler) as gateway:
            response = await gateway.complete([ChatMessage(role="user", content="Hi")])

        assert response.content == "hello"

    async def test_error_status_maps_to_upstream_error(self):
        """Test that a provider 500 surfaces its status and body, without retry."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(500, json={"error": "boom"})

        async with make_gateway(handler) as gateway:
            with pytest.raises(UpstreamError) as exc_info:
                await gateway.complete([ChatMessage(role="user", content="Hi")])

        assert exc_info.value.status_code == 500
        assert "boom" in exc_info.value.body
        assert calls == 1

    async def test_transport_failure_has_no_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_gateway(handler) as gateway:
            with pytest.raises(UpstreamError) as exc_info:
                await gateway.complete([ChatMessage(role="user", content="Hi")])

        assert exc_info.value.status_code is None

    async def test_non_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        async with make_gateway(handler) as gateway:
            with pytest.raises(UpstreamError):
                await gateway.complete([ChatMessage(role="user", content="Hi")])

    async def test_unrecognized_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        async with make_gateway(handler) as gateway:
            with pytest.raises(UpstreamError, match="Unrecognized"):
                await gateway.complete([ChatMessage(role="user", content="Hi")])


class TestGatewayFactory:
    """Tests for create_completion_gateway()."""

    def test_llama_preset(self):
        gateway = create_completion_gateway("llama", api_key="k")

        assert isinstance(gateway, OpenAICompatibleGateway)
        assert gateway.model == PROVIDER_PRESETS["llama"]["model"]
        assert gateway.base_url.startswith("https://api.llama.com/v1")

    def test_overrides_win_over_preset(self):
        gateway = create_completion_gateway(
            "llama",
            api_key="k",
            model="Llama-4-Maverick-17B-128E-Instruct-FP8",
            base_url="https://proxy.example.test/v1",
        )

        assert gateway.model == "Llama-4-Maverick-17B-128E-Instruct-FP8"
        assert gateway.base_url.startswith("https://proxy.example.test/v1")

    def test_provider_name_is_case_insensitive(self):
        gateway = create_completion_gateway("DeepSeek", api_key="k")
        assert gateway.model == "deepseek-chat"

    def test_missing_api_key(self):
        with pytest.raises(TypeError, match="api_key"):
            create_completion_gateway("llama")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_completion_gateway("nonexistent", api_key="k")

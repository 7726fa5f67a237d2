from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import UpstreamError
from ...logger import get_logger
from ..base import CompletionGateway
from ..models import ChatMessage, LLMResponse, serialize_messages
from ..parsing import parse_completion_response

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0


class OpenAICompatibleGateway(CompletionGateway):
    """Gateway for any provider exposing a ``/chat/completions`` endpoint.

    Hidden design decisions:
    - API client initialization (via the OpenAI SDK, retries disabled)
    - Bearer authentication
    - Decoding of the provider's response shape
    - Translation of SDK errors into UpstreamError

    The raw HTTP body is decoded here rather than by the SDK, because the
    Llama API answers with a ``completion_message`` body the SDK's
    chat-completion model does not describe.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the gateway.

        Args:
            api_key: Provider API key, sent as a bearer credential
            model: Model identifier sent with every request
            base_url: Provider API base URL (SDK default if None)
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the configured model name."""
        return self._model

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def complete(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> LLMResponse:
        """Request a completion for the given messages.

        Args:
            messages: Conversation messages in chronological order
            **kwargs: Additional request body parameters

        Returns:
            LLMResponse with generated content
        """
        try:
            raw = await self._client.chat.completions.with_raw_response.create(
                model=self._model,
                messages=serialize_messages(messages),
                **kwargs
            )
        except openai.APIStatusError as e:
            body = e.response.text
            logger.error(
                "Completion provider returned an error",
                status_code=e.status_code,
                body=body,
                model=self._model,
            )
            raise UpstreamError(
                "Completion provider request failed",
                status_code=e.status_code,
                body=body,
            ) from e
        except openai.APIConnectionError as e:
            logger.error(
                "Completion provider unreachable",
                error=str(e),
                timeout=isinstance(e, openai.APITimeoutError),
                model=self._model,
            )
            raise UpstreamError(f"Completion provider unreachable: {e}") from e

        try:
            data = raw.http_response.json()
        except ValueError as e:
            raise UpstreamError("Completion provider returned a non-JSON body") from e

        try:
            return parse_completion_response(data, model=self._model)
        except UpstreamError:
            logger.error("Unusable completion response", body=raw.http_response.text)
            raise

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

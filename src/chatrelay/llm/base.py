from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse


class CompletionGateway(ABC):
    """Abstract base class for completion providers.

    This module hides the design decision of which provider answers.
    Implementations must handle provider-specific details like:
    - API client setup and bearer authentication
    - Request/response format conversion
    - Mapping failures onto UpstreamError

    No retry is performed: each call is attempted exactly once.

    Supports async context manager protocol for proper resource cleanup:
        async with gateway:
            response = await gateway.complete(messages)
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> LLMResponse:
        """Generate the assistant reply for an assembled conversation.

        Args:
            messages: System prompt, context window and current user message
            **kwargs: Provider-specific request parameters

        Returns:
            LLMResponse with non-empty content

        Raises:
            UpstreamError: On HTTP error status, transport failure or an
                unrecognized response body
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "CompletionGateway":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise

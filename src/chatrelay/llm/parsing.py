"""Decoding of provider response bodies.

Providers answer in one of two shapes. The body is decoded as a tagged
union: each known shape is tried in order and the first one whose
discriminating fields validate wins.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..errors import UpstreamError
from .models import ChoicesPayload, CompletionMessagePayload, LLMResponse, ResponsePayload

_RESPONSE_SHAPES: tuple[type[ResponsePayload], ...] = (
    ChoicesPayload,
    CompletionMessagePayload,
)


def decode_payload(data: Any) -> ResponsePayload:
    """Match a decoded JSON body against the known response shapes.

    Raises:
        UpstreamError: If no shape matches
    """
    if isinstance(data, dict):
        for shape in _RESPONSE_SHAPES:
            try:
                return shape.model_validate(data)
            except PydanticValidationError:
                continue

    keys = sorted(data) if isinstance(data, dict) else type(data).__name__
    raise UpstreamError(f"Unrecognized completion response shape: {keys}")


def parse_completion_response(data: Any, model: str) -> LLMResponse:
    """Extract the reply from a provider response body.

    Args:
        data: Decoded JSON body
        model: Model name to report when the body does not carry one

    Returns:
        LLMResponse with non-empty content

    Raises:
        UpstreamError: If the shape is unrecognized or the reply is empty
    """
    payload = decode_payload(data)
    content = payload.reply_text()
    if not content.strip():
        raise UpstreamError("Completion provider returned an empty reply")

    reported_model = getattr(payload, "model", None) or model
    return LLMResponse(content=content, model=reported_model, usage=payload.usage_dict())

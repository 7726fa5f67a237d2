from .base import CompletionGateway
from .factory import PROVIDER_PRESETS, create_completion_gateway
from .models import ChatMessage, LLMResponse
from .parsing import parse_completion_response
from .providers import OpenAICompatibleGateway

__all__ = [
    "CompletionGateway",
    "PROVIDER_PRESETS",
    "create_completion_gateway",
    "ChatMessage",
    "LLMResponse",
    "OpenAICompatibleGateway",
    "parse_completion_response",
]

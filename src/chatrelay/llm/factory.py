from typing import Any

from .base import CompletionGateway
from .providers import OpenAICompatibleGateway

# Endpoint and model defaults per provider preset
PROVIDER_PRESETS: dict[str, dict[str, str | None]] = {
    "llama": {
        "base_url": "https://api.llama.com/v1",
        "model": "Llama-3.3-70B-Instruct",
    },
    "openai": {
        "base_url": None,
        "model": "gpt-4o-mini",
    },
    "deepseek": {
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-chat",
    },
}


def create_completion_gateway(provider: str = "llama", **config: Any) -> CompletionGateway:
    """Create a completion gateway instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider preset ('llama', 'openai', 'deepseek')
        **config: Gateway configuration
            - api_key: str (required)
            - model: str (default: preset model)
            - base_url: str (default: preset endpoint)
            - timeout: float (default: 60 seconds)

    Returns:
        Initialized gateway instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> gateway = create_completion_gateway(
        ...     "llama",
        ...     api_key="LLM|...",
        ...     model="Llama-4-Maverick-17B-128E-Instruct-FP8"
        ... )
    """
    provider_lower = provider.lower()

    preset = PROVIDER_PRESETS.get(provider_lower)
    if preset is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(repr(name) for name in PROVIDER_PRESETS)}"
        )

    if "api_key" not in config:
        raise TypeError(f"{provider_lower} provider requires 'api_key' in config")

    options = {key: value for key, value in preset.items() if value is not None}
    options.update({key: value for key, value in config.items() if value is not None})
    return OpenAICompatibleGateway(**options)

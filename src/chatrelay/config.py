"""Process configuration.

Settings are read once from the environment (and an optional .env file)
into a frozen object that is passed explicitly to the components.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
DEFAULT_CONTEXT_WINDOW = 15


class Settings(BaseSettings):
    """Immutable application settings.

    Environment variables (case-insensitive):
        LLM_PROVIDER: Completion provider preset (default: llama)
        LLM_API_KEY / LLAMA_API_KEY: Provider bearer credential (required to serve)
        LLM_MODEL / LLAMA_MODEL: Model identifier (default: provider preset)
        LLM_BASE_URL: Override the provider endpoint
        LLM_TIMEOUT: Provider request timeout in seconds (default: 60)
        SYSTEM_PROMPT: System prompt prefixed to every request
        CONTEXT_WINDOW_SIZE / MEMORY_LENGTH: Prior messages sent per turn (default: 15)
        STORE_URL / MONGODB_URI: memory://, sqlite:///path or mongodb://...
        ACCESS_PASSPHRASE: Shared passphrase; enables the session token gate
        SESSION_TOKEN_MINUTES: Lifetime of issued session tokens (default: 30)
        HOST / PORT: Bind address for `chatrelay serve`
        LOG_LEVEL / JSON_LOGS: Logging configuration
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    llm_provider: str = Field(default="llama")
    llm_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "LLM_API_KEY", "LLAMA_API_KEY"),
    )
    llm_model: str | None = Field(
        default=None,
        validation_alias=AliasChoices("llm_model", "LLM_MODEL", "LLAMA_MODEL"),
    )
    llm_base_url: str | None = None
    llm_timeout: float = Field(default=60.0, gt=0)

    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, min_length=1)
    context_window_size: int = Field(
        default=DEFAULT_CONTEXT_WINDOW,
        ge=1,
        validation_alias=AliasChoices(
            "context_window_size", "CONTEXT_WINDOW_SIZE", "MEMORY_LENGTH"
        ),
    )

    store_url: str = Field(
        default="memory://",
        validation_alias=AliasChoices("store_url", "STORE_URL", "MONGODB_URI"),
    )

    access_passphrase: SecretStr | None = None
    session_token_minutes: int = Field(default=30, ge=1)

    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"
    json_logs: bool = False

    def require_api_key(self) -> str:
        """Return the provider credential, failing if it is not configured."""
        if self.llm_api_key is None or not self.llm_api_key.get_secret_value():
            raise ConfigurationError(
                "Missing LLM_API_KEY (or LLAMA_API_KEY) in environment or .env"
            )
        return self.llm_api_key.get_secret_value()

    def gateway_config(self) -> dict:
        """Keyword arguments for create_completion_gateway()."""
        config: dict = {
            "api_key": self.require_api_key(),
            "timeout": self.llm_timeout,
        }
        if self.llm_model:
            config["model"] = self.llm_model
        if self.llm_base_url:
            config["base_url"] = self.llm_base_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    load_dotenv()
    return Settings()

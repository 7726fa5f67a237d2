"""Unit tests for settings and the session token signer."""
from datetime import timedelta

import jwt
import pytest

from chatrelay.api import SessionTokenSigner
from chatrelay.config import Settings
from chatrelay.errors import AuthenticationError, ConfigurationError

SECRET = "test-signing-key-0123456789abcdef0123456789"

ENV_VARS = (
    "LLM_PROVIDER", "LLM_API_KEY", "LLAMA_API_KEY", "LLM_MODEL", "LLAMA_MODEL",
    "LLM_BASE_URL", "LLM_TIMEOUT", "SYSTEM_PROMPT", "CONTEXT_WINDOW_SIZE",
    "MEMORY_LENGTH", "STORE_URL", "MONGODB_URI", "ACCESS_PASSPHRASE",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove chatrelay variables inherited from the developer's shell."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.llm_provider == "llama"
        assert settings.context_window_size == 15
        assert settings.store_url == "memory://"
        assert settings.system_prompt == "You are a helpful assistant."
        assert settings.access_passphrase is None
        assert settings.port == 3000

    def test_legacy_variable_names(self, clean_env):
        """Test that the Llama-era variable names are honoured."""
        clean_env.setenv("LLAMA_API_KEY", "llama-key")
        clean_env.setenv("LLAMA_MODEL", "Llama-4-Scout")
        clean_env.setenv("MEMORY_LENGTH", "4")
        clean_env.setenv("MONGODB_URI", "mongodb://db:27017/chat")

        settings = Settings(_env_file=None)

        assert settings.require_api_key() == "llama-key"
        assert settings.llm_model == "Llama-4-Scout"
        assert settings.context_window_size == 4
        assert settings.store_url == "mongodb://db:27017/chat"

    def test_settings_are_frozen(self, clean_env):
        settings = Settings(_env_file=None)
        with pytest.raises(ValueError):
            settings.port = 8080

    @pytest.mark.parametrize("value", ["0", "-3"])
    def test_window_must_be_positive(self, clean_env, value):
        clean_env.setenv("CONTEXT_WINDOW_SIZE", value)
        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_missing_api_key(self, clean_env):
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None).require_api_key()

    def test_gateway_config(self, clean_env):
        settings = Settings(
            _env_file=None,
            llm_api_key="k",
            llm_model="m",
            llm_timeout=5,
        )

        assert settings.gateway_config() == {"api_key": "k", "timeout": 5.0, "model": "m"}

    def test_api_key_is_not_printed(self, clean_env):
        settings = Settings(_env_file=None, llm_api_key="super-secret")
        assert "super-secret" not in repr(settings)


class TestSessionTokenSigner:
    """Tests for SessionTokenSigner."""

    def test_issue_and_verify(self):
        signer = SessionTokenSigner("pass")
        signer.verify(signer.issue("pass"))

    def test_wrong_passphrase(self):
        with pytest.raises(AuthenticationError):
            SessionTokenSigner("pass").issue("nope")

    @pytest.mark.parametrize("token", [None, "", "abc", "abc.", ".sig", "abc.def"])
    def test_invalid_tokens(self, token):
        with pytest.raises(AuthenticationError):
            SessionTokenSigner("pass").verify(token)

    def test_tokens_do_not_cross_processes(self):
        """Test that a token from one signing key is rejected by another."""
        token = SessionTokenSigner("pass").issue("pass")
        with pytest.raises(AuthenticationError):
            SessionTokenSigner("pass").verify(token)

    def test_expired_token_rejected(self):
        """Test that a token past its exp claim no longer verifies."""
        signer = SessionTokenSigner("pass")
        token = signer.issue("pass", expires_delta=timedelta(seconds=-5))

        with pytest.raises(AuthenticationError, match="expired"):
            signer.verify(token)

    def test_token_carries_expiry(self):
        signer = SessionTokenSigner("pass", secret_key=SECRET, lifetime=timedelta(minutes=5))
        claims = jwt.decode(signer.issue("pass"), SECRET, algorithms=["HS256"])

        assert "exp" in claims

    def test_foreign_subject_rejected(self):
        token = jwt.encode({"sub": "someone-else"}, SECRET, algorithm="HS256")
        with pytest.raises(AuthenticationError):
            SessionTokenSigner("pass", secret_key=SECRET).verify(token)

    def test_empty_passphrase_rejected(self):
        with pytest.raises(ValueError):
            SessionTokenSigner("")

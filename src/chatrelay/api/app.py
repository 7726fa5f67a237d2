"""FastAPI application factory."""

from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI

from .. import __version__
from ..config import Settings, get_settings
from ..context import ContextAssembler
from ..llm import CompletionGateway, create_completion_gateway
from ..logger import get_logger
from ..service import ConversationService
from ..store import ConversationStore, create_conversation_store
from .auth import SessionTokenSigner
from .errors import register_exception_handlers
from .routes import router

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    store: ConversationStore | None = None,
    gateway: CompletionGateway | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Components are constructed here, once, from the settings; the store
    connects when the application starts and both store and gateway are
    closed on shutdown.

    Args:
        settings: Application settings (loaded from the environment if None)
        store: Conversation store to use instead of ``settings.store_url``
        gateway: Completion gateway to use instead of the configured provider

    Raises:
        ConfigurationError: If no gateway is given and no API key is configured
    """
    settings = settings or get_settings()

    if gateway is None:
        gateway = create_completion_gateway(settings.llm_provider, **settings.gateway_config())
    if store is None:
        store = create_conversation_store(settings.store_url)

    service = ConversationService(
        store=store,
        gateway=gateway,
        assembler=ContextAssembler(settings.system_prompt, settings.context_window_size),
    )

    signer = None
    if settings.access_passphrase is not None:
        signer = SessionTokenSigner(
            settings.access_passphrase.get_secret_value(),
            lifetime=timedelta(minutes=settings.session_token_minutes),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.connect()
        logger.info(
            "chatrelay started",
            store=store.backend_type,
            provider=settings.llm_provider,
            window=settings.context_window_size,
            gated=signer is not None,
        )
        try:
            yield
        finally:
            await store.disconnect()
            await gateway.close()
            logger.info("chatrelay stopped")

    app = FastAPI(title="chatrelay", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service
    app.state.signer = signer

    register_exception_handlers(app)
    app.include_router(router)
    return app

"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hookguard import __version__
from hookguard.config import Settings, settings as default_settings
from hookguard.crypto.keys import KeyRing, load_key_ring
from hookguard.errors.exceptions import ConfigurationError
from hookguard.logging_config import configure_logging
from hookguard.services.ingress import WebhookIngress
from hookguard.services.signing_trigger import SigningTriggerClient

logger = logging.getLogger(__name__)


def build_ingress(settings: Settings, key_ring: KeyRing, http_client: httpx.AsyncClient) -> WebhookIngress:
    """Wire the trigger client and key ring into a webhook processor."""
    trigger_client = SigningTriggerClient(
        http_client,
        api_token=settings.fordefi_api_user_token.get_secret_value(),
        url_template=settings.signing_trigger_url_template,
        timeout=settings.signing_trigger_timeout_seconds,
    )
    return WebhookIngress(key_ring, trigger_client)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load keys and open the outbound client; refuse to start on bad config."""
        if not settings.fordefi_api_user_token.get_secret_value():
            raise ConfigurationError("FORDEFI_API_USER_TOKEN environment variable is required")
        key_ring = load_key_ring(settings)

        async with httpx.AsyncClient(timeout=settings.signing_trigger_timeout_seconds) as http_client:
            app.state.ingress = build_ingress(settings, key_ring, http_client)
            logger.info("Webhook server started on %s:%s", settings.host, settings.port)
            yield
        logger.info("Webhook server shutdown complete")

    app = FastAPI(
        title="HookGuard",
        version=__version__,
        description="Verifies signed webhooks and triggers transaction signing.",
        lifespan=lifespan,
    )

    from hookguard.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from hookguard.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from hookguard.api.router import api_router
    app.include_router(api_router)

    return app


configure_logging(log_level=default_settings.log_level, json_output=default_settings.json_logs)

app = create_app()

"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from hookgate import __version__
from hookgate.config import Settings, settings as default_settings
from hookgate.logging_config import configure_logging
from hookgate.webhooks.emitter import ERROR, WILDCARD, EventEmitter
from hookgate.webhooks.options import WebhookOptions

logger = logging.getLogger(__name__)


def _log_delivery(event_type: str, payload) -> None:
    logger.debug("Emitted webhook event %s", event_type)


def _log_rejection(error, request, response) -> None:
    client = request.client.host if request.client else "unknown"
    logger.info("Rejected webhook from %s: %s", client, error)


def create_app(settings: Settings | None = None, emitter: EventEmitter | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Listeners subscribe on ``app.state.emitter`` (or the emitter passed in).
    """
    settings = settings or default_settings
    emitter = emitter if emitter is not None else EventEmitter()
    options = WebhookOptions.from_settings(settings)

    app = FastAPI(
        title="hookgate",
        version=__version__,
        description="Signed webhook receiver with multi-key event fan-out.",
    )
    app.state.emitter = emitter
    app.state.webhook_options = options

    emitter.on(WILDCARD, _log_delivery)
    emitter.on(ERROR, _log_rejection)

    from hookgate.api.middleware.webhook import WebhookMiddleware
    app.add_middleware(
        WebhookMiddleware,
        options=options,
        emitter=emitter,
        body_timeout=settings.effective_body_timeout,
    )

    # Register error handlers
    from hookgate.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from hookgate.api.router import api_router
    app.include_router(api_router)

    if not options.verifies_signature:
        logger.warning("No webhook secret configured; signatures will not be verified")
    logger.info("Webhook receiver listening on POST %s", options.path)
    return app


def build_app() -> FastAPI:
    """Uvicorn factory entry point; configures logging from settings."""
    configure_logging(log_level=default_settings.log_level, json_output=default_settings.json_logs)
    return create_app()

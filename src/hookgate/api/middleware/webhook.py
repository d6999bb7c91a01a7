"""Webhook receiving middleware."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from hookgate.webhooks.emitter import EventEmitter
from hookgate.webhooks.handler import WebhookHandler
from hookgate.webhooks.options import WebhookOptions


class WebhookMiddleware(BaseHTTPMiddleware):
    """Intercept POSTs to the webhook path; pass everything else down the chain."""

    def __init__(
        self,
        app: ASGIApp,
        options: WebhookOptions,
        emitter: EventEmitter | None = None,
        body_timeout: float | None = None,
    ) -> None:
        super().__init__(app)
        self.handler = WebhookHandler(options, emitter, body_timeout=body_timeout)

    @property
    def emitter(self) -> EventEmitter:
        return self.handler.emitter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.handler.matches(request):
            return await call_next(request)
        return await self.handler.handle(request)

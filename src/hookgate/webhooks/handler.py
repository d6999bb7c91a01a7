"""Webhook request handling: validate, verify, decode and fan out.

A delivery moves through these checks in order, stopping at the first failure:

1. delivery id header present
2. event type header present
3. signature header present (only when a secret is configured)
4. body obtainable (read from the stream, or pre-decoded upstream)
5. signature matches the body (only when a secret is configured)
6. payload decodes as JSON (form bodies carry it in a ``payload`` field)

Accepted deliveries are emitted under ``"*"``, the event type and, when
enabled, the repository name. Rejections produce a 400 and an ``"error"``
emission carrying the exception, request and response.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs

from starlette.requests import ClientDisconnect, Request
from starlette.responses import JSONResponse, Response

from hookgate.errors.exceptions import (
    BodyUnavailableError,
    MissingHeaderError,
    PayloadDecodeError,
    SignatureMismatchError,
    WebhookError,
)
from hookgate.logging_config import bind_request_context, clear_request_context
from hookgate.models.webhook import InboundRequest, WebhookEvent
from hookgate.webhooks.emitter import ERROR, WILDCARD, EventEmitter
from hookgate.webhooks.options import WebhookOptions
from hookgate.webhooks.signing import verify_signature

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

RESERVED_KEYS = frozenset({WILDCARD, ERROR})


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def decode_payload(data: bytes | str, content_type: str | None = None) -> Any:
    """Decode a raw body into a structured payload.

    Form-encoded bodies carry the JSON document in their ``payload`` field.
    Raises PayloadDecodeError with the underlying parser message.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
    except UnicodeDecodeError as exc:
        raise PayloadDecodeError(str(exc)) from exc

    if _media_type(content_type) == FORM_CONTENT_TYPE:
        fields = parse_qs(text, keep_blank_values=True)
        values = fields.get("payload")
        if not values:
            raise PayloadDecodeError("No payload field found in the form body")
        text = values[0]

    try:
        return json.loads(text)
    except (ValueError, RecursionError) as exc:
        # RecursionError: nesting deeper than the interpreter stack allows
        raise PayloadDecodeError(str(exc)) from exc


def canonical_body(parsed: Any) -> bytes:
    """Re-serialize a pre-decoded body to the bytes its signature covers."""
    if isinstance(parsed, bytes):
        return parsed
    if isinstance(parsed, str):
        return parsed.encode("utf-8")
    return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def source_of(payload: Any) -> str | None:
    """Return ``payload["repository"]["name"]`` if present."""
    if not isinstance(payload, Mapping):
        return None
    repository = payload.get("repository")
    if not isinstance(repository, Mapping):
        return None
    name = repository.get("name")
    if isinstance(name, str) and name:
        return name
    return None


class WebhookHandler:
    """Handles deliveries addressed to ``options.path``.

    Holds no per-request state; the emitter is the only long-lived
    collaborator and is shared by reference.
    """

    def __init__(
        self,
        options: WebhookOptions,
        emitter: EventEmitter | None = None,
        body_timeout: float | None = None,
    ) -> None:
        self.options = options
        self.emitter = emitter if emitter is not None else EventEmitter()
        self.body_timeout = body_timeout

    def matches(self, request: Request) -> bool:
        """True if the request is a POST to the configured path (query ignored)."""
        return request.method == "POST" and request.url.path == self.options.path

    async def handle(self, request: Request) -> Response:
        """Run a matching request through validation and emission."""
        try:
            return await self._process(request)
        finally:
            clear_request_context()

    async def _process(self, request: Request) -> Response:
        try:
            inbound = self._read_headers(request)
            bind_request_context(inbound.delivery_id, inbound.event_type)
            inbound = await self._acquire_body(request, inbound)
            event = self._validate(inbound)
        except WebhookError as exc:
            return self._reject(exc, request)

        self._publish(event)
        logger.info(
            "Webhook delivery %s accepted (event=%s, source=%s)",
            event.delivery_id,
            event.event_type,
            event.source,
        )
        return JSONResponse({"success": True}, status_code=200)

    def _read_headers(self, request: Request) -> InboundRequest:
        opts = self.options
        headers = request.headers

        delivery_id = headers.get(opts.delivery_header)
        if not delivery_id:
            raise MissingHeaderError("No id found in the request", opts.delivery_header)

        event_type = headers.get(opts.event_header)
        if not event_type:
            raise MissingHeaderError("No event found in the request", opts.event_header)

        signature = headers.get(opts.signature_header) or None
        if opts.verifies_signature and not signature:
            raise MissingHeaderError("No signature found in the request", opts.signature_header)

        return InboundRequest(
            method=request.method,
            path=request.url.path,
            delivery_id=delivery_id,
            event_type=event_type,
            signature=signature,
            content_type=headers.get("content-type"),
        )

    async def _acquire_body(self, request: Request, inbound: InboundRequest) -> InboundRequest:
        if self.options.body_mode == "parsed":
            parsed = getattr(request.state, "parsed_body", None)
            if parsed is None:
                raise BodyUnavailableError("Make sure body-parser is used")
            return inbound.model_copy(update={"parsed_body": parsed})

        try:
            if self.body_timeout:
                body = await asyncio.wait_for(request.body(), timeout=self.body_timeout)
            else:
                body = await request.body()
        except ClientDisconnect as exc:
            raise BodyUnavailableError("Client disconnected before the body was received") from exc
        except asyncio.TimeoutError as exc:
            raise BodyUnavailableError("Timed out reading request body") from exc
        return inbound.model_copy(update={"body": body})

    def _validate(self, inbound: InboundRequest) -> WebhookEvent:
        opts = self.options

        if opts.verifies_signature:
            signed = inbound.body if inbound.is_raw else canonical_body(inbound.parsed_body)
            if not verify_signature(opts.secret, signed, inbound.signature, opts.sign_data):
                raise SignatureMismatchError()

        if inbound.is_raw:
            payload = decode_payload(inbound.body, inbound.content_type)
        else:
            payload = self._decode_parsed(inbound.parsed_body, inbound.content_type)

        if not isinstance(payload, Mapping):
            raise PayloadDecodeError("Payload must be a JSON object")

        return WebhookEvent(
            delivery_id=inbound.delivery_id,
            event_type=inbound.event_type,
            payload=payload,
            source=source_of(payload) if opts.emit_source else None,
        )

    @staticmethod
    def _decode_parsed(parsed: Any, content_type: str | None) -> Any:
        if isinstance(parsed, (bytes, str)):
            return decode_payload(parsed, content_type)
        if _media_type(content_type) == FORM_CONTENT_TYPE and isinstance(parsed, Mapping):
            # Upstream form parsers leave the JSON document as a string field
            field = parsed.get("payload")
            if not isinstance(field, str):
                raise PayloadDecodeError("No payload field found in the form body")
            return decode_payload(field)
        return parsed

    def _publish(self, event: WebhookEvent) -> None:
        self.emitter.emit(WILDCARD, event.event_type, event.payload)
        # "*" and "error" listeners expect other arguments
        if event.event_type in RESERVED_KEYS:
            logger.warning("Event type %r collides with a reserved key; not emitted by type", event.event_type)
        else:
            self.emitter.emit(event.event_type, event.payload)
        if event.source is not None and event.source not in RESERVED_KEYS:
            self.emitter.emit(event.source, event.event_type, event.payload)

    def _reject(self, exc: WebhookError, request: Request) -> JSONResponse:
        logger.warning("Webhook delivery rejected (%s): %s", exc.code, exc.message)
        response = JSONResponse({"error": exc.message}, status_code=exc.status_code)
        self.emitter.emit(ERROR, exc, request, response)
        return response

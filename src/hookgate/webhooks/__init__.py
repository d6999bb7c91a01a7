"""Inbound webhook verification and fan-out."""

from hookgate.webhooks.emitter import ERROR, WILDCARD, EventEmitter
from hookgate.webhooks.handler import WebhookHandler
from hookgate.webhooks.options import WebhookOptions
from hookgate.webhooks.signing import compute_signature, sign_sha1, sign_sha256, verify_signature

__all__ = [
    "ERROR",
    "WILDCARD",
    "EventEmitter",
    "WebhookHandler",
    "WebhookOptions",
    "compute_signature",
    "sign_sha1",
    "sign_sha256",
    "verify_signature",
]

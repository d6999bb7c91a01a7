"""Webhook handler options, resolved once at construction."""

from dataclasses import dataclass

from hookgate.errors.exceptions import ConfigurationError
from hookgate.webhooks.signing import SignFn, get_signer, sign_sha1

BODY_MODES = ("raw", "parsed")


@dataclass(frozen=True)
class WebhookOptions:
    """Immutable configuration for a :class:`WebhookHandler`.

    ``path`` is the only required field. An empty ``secret`` disables
    signature verification. In ``"parsed"`` body mode the handler reads the
    body an upstream collaborator stored on ``request.state.parsed_body``
    instead of consuming the request stream.
    """

    path: str
    secret: str = ""
    delivery_header: str = "x-github-delivery"
    event_header: str = "x-github-event"
    signature_header: str = "x-hub-signature"
    sign_data: SignFn = sign_sha1
    body_mode: str = "raw"
    emit_source: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise ConfigurationError("must provide a 'path' option")
        if not isinstance(self.secret, str):
            raise ConfigurationError("'secret' option must be a string")
        if not callable(self.sign_data):
            raise ConfigurationError("'sign_data' option must be callable")
        if self.body_mode not in BODY_MODES:
            raise ConfigurationError(
                f"'body_mode' must be one of: {', '.join(BODY_MODES)} (got '{self.body_mode}')"
            )
        # Starlette exposes header lookups case-insensitively; keep names canonical
        for name in ("delivery_header", "event_header", "signature_header"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"'{name}' option must be a non-empty string")
            object.__setattr__(self, name, value.lower())

    @property
    def verifies_signature(self) -> bool:
        return bool(self.secret)

    @classmethod
    def from_settings(cls, settings) -> "WebhookOptions":
        """Build options from the process :class:`~hookgate.config.Settings`."""
        return cls(
            path=settings.webhook_path,
            secret=settings.webhook_secret,
            delivery_header=settings.delivery_header,
            event_header=settings.event_header,
            signature_header=settings.signature_header,
            sign_data=get_signer(settings.signature_algorithm),
            body_mode=settings.body_mode,
            emit_source=settings.emit_source,
        )

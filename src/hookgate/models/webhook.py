"""Pydantic models for inbound webhook deliveries."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class InboundRequest(BaseModel):
    """Read-only view of a delivery addressed to the webhook path.

    Exactly one of ``body`` (raw bytes read from the stream) and
    ``parsed_body`` (decoded upstream) is set.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    delivery_id: str | None = None
    event_type: str | None = None
    signature: str | None = None
    content_type: str | None = None
    body: bytes | None = None
    parsed_body: Any = None

    @model_validator(mode="after")
    def _one_body_source(self) -> "InboundRequest":
        if self.body is not None and self.parsed_body is not None:
            raise ValueError("body and parsed_body are mutually exclusive")
        return self

    @property
    def is_raw(self) -> bool:
        return self.body is not None


class WebhookEvent(BaseModel):
    """A delivery that passed header, signature and payload validation."""

    model_config = ConfigDict(frozen=True)

    delivery_id: str
    event_type: str
    payload: Any
    source: str | None = None

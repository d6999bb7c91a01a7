"""Shared test fixtures."""

import functools

import pytest
from httpx import ASGITransport, AsyncClient

from hookgate.config import Settings
from hookgate.webhooks.emitter import EventEmitter
from hookgate.webhooks.signing import sign_sha1

SECRET = "test-secret"
WEBHOOK_PATH = "/webhook"


def signed_headers(
    body: bytes,
    event: str = "push",
    delivery: str = "72d3162e-cc78-11e3-81ab-4c9367dc0958",
    secret: str = SECRET,
    sign=sign_sha1,
    signature_header: str = "X-Hub-Signature",
    **extra: str,
) -> dict[str, str]:
    """Headers for a correctly signed delivery."""
    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Delivery": delivery,
        "X-GitHub-Event": event,
        signature_header: sign(secret.encode("utf-8"), body),
    }
    headers.update(extra)
    return headers


class EmissionLog:
    """Records emissions for selected keys, in the order they happen."""

    def __init__(self, emitter: EventEmitter) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self._emitter = emitter

    def watch(self, *keys: str) -> "EmissionLog":
        for key in keys:
            self._emitter.on(key, functools.partial(self._record, key))
        return self

    def _record(self, key: str, *args) -> None:
        self.calls.append((key, args))

    def keys(self) -> list[str]:
        return [key for key, _ in self.calls]


@pytest.fixture
def emitter():
    return EventEmitter()


@pytest.fixture
def emissions(emitter):
    return EmissionLog(emitter)


@pytest.fixture
def settings():
    return Settings(webhook_path=WEBHOOK_PATH, webhook_secret=SECRET, json_logs=False)


@pytest.fixture
def app(settings, emitter):
    """Application with the webhook middleware and a couple of downstream routes."""
    from hookgate.main import create_app

    _app = create_app(settings, emitter)

    @_app.get(WEBHOOK_PATH)
    async def webhook_get():
        return {"route": "downstream-get"}

    @_app.post("/other")
    async def other_post():
        return {"route": "downstream-post"}

    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

"""Tests for webhook options and settings."""

import dataclasses

import pytest

from hookgate.config import Settings
from hookgate.errors.exceptions import ConfigurationError
from hookgate.webhooks.options import WebhookOptions
from hookgate.webhooks.signing import sign_sha1, sign_sha256


def test_defaults():
    opts = WebhookOptions(path="/hook")
    assert opts.secret == ""
    assert opts.delivery_header == "x-github-delivery"
    assert opts.event_header == "x-github-event"
    assert opts.signature_header == "x-hub-signature"
    assert opts.sign_data is sign_sha1
    assert opts.body_mode == "raw"
    assert opts.emit_source is True
    assert opts.verifies_signature is False


def test_secret_enables_verification():
    assert WebhookOptions(path="/hook", secret="s").verifies_signature


@pytest.mark.parametrize("path", ["", "hook", None, 42])
def test_path_is_required(path):
    with pytest.raises(ConfigurationError, match="must provide a 'path' option"):
        WebhookOptions(path=path)


def test_configuration_error_is_type_error():
    with pytest.raises(TypeError):
        WebhookOptions(path=None)


def test_invalid_body_mode():
    with pytest.raises(ConfigurationError, match="body_mode"):
        WebhookOptions(path="/hook", body_mode="stream")


def test_sign_data_must_be_callable():
    with pytest.raises(ConfigurationError):
        WebhookOptions(path="/hook", sign_data="sha1")


def test_header_names_lowercased():
    opts = WebhookOptions(path="/hook", event_header="X-Gitea-Event")
    assert opts.event_header == "x-gitea-event"


def test_options_are_immutable():
    opts = WebhookOptions(path="/hook")
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.secret = "changed"


def test_from_settings():
    settings = Settings(
        webhook_path="/gh",
        webhook_secret="abc",
        signature_header="X-Hub-Signature-256",
        signature_algorithm="sha256",
        emit_source=False,
    )
    opts = WebhookOptions.from_settings(settings)
    assert opts.path == "/gh"
    assert opts.secret == "abc"
    assert opts.signature_header == "x-hub-signature-256"
    assert opts.sign_data is sign_sha256
    assert opts.emit_source is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("HOOKGATE_WEBHOOK_PATH", "/env-hook")
    monkeypatch.setenv("HOOKGATE_BODY_TIMEOUT", "0")
    settings = Settings()
    assert settings.webhook_path == "/env-hook"
    assert settings.effective_body_timeout is None

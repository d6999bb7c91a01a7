"""Webhook signature computation and constant-time verification.

Senders sign the raw request body with HMAC using a shared secret and send
the result as ``<algorithm>=<hex digest>`` in a header. Verification recomputes
the signature and compares the two strings with ``hmac.compare_digest``.
"""

import hashlib
import hmac
from collections.abc import Callable

from hookgate.errors.exceptions import ConfigurationError

SignFn = Callable[[bytes, bytes], str]


def _to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def sign_sha1(secret: bytes, body: bytes) -> str:
    """Compute the ``sha1=`` signature sent in ``X-Hub-Signature``."""
    return "sha1=" + hmac.new(secret, body, hashlib.sha1).hexdigest()


def sign_sha256(secret: bytes, body: bytes) -> str:
    """Compute the ``sha256=`` signature sent in ``X-Hub-Signature-256``."""
    return "sha256=" + hmac.new(secret, body, hashlib.sha256).hexdigest()


# Algorithm name -> signing function
SIGNERS: dict[str, SignFn] = {
    "sha1": sign_sha1,
    "sha256": sign_sha256,
}


def get_signer(name: str) -> SignFn:
    """Resolve a signing function by algorithm name."""
    try:
        return SIGNERS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown signature algorithm '{name}' (expected one of: {', '.join(SIGNERS)})"
        ) from None


def compute_signature(secret: str | bytes, body: str | bytes, sign_data: SignFn = sign_sha1) -> str:
    """Apply the signing function to ``body`` with ``secret``."""
    return sign_data(_to_bytes(secret), _to_bytes(body))


def verify_signature(
    secret: str | bytes,
    body: str | bytes,
    claimed: str | None,
    sign_data: SignFn = sign_sha1,
) -> bool:
    """Return True iff ``claimed`` is byte-identical to the expected signature.

    A length mismatch returns early; equal-length inputs are compared in
    constant time.
    """
    if not claimed:
        return False
    expected = compute_signature(secret, body, sign_data)
    return hmac.compare_digest(_to_bytes(expected), _to_bytes(claimed))

"""Custom exception classes for hookgate."""


class HookgateError(Exception):
    """Base exception for hookgate."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(HookgateError, TypeError):
    """Invalid options supplied at construction time."""

    def __init__(self, message: str):
        super().__init__("CONFIGURATION_ERROR", message)


class WebhookError(HookgateError):
    """An inbound delivery was rejected. Always reported to the sender as a 400."""

    def __init__(self, code: str, message: str, details=None):
        super().__init__(code, message, details, status_code=400)


class MissingHeaderError(WebhookError):
    """A required delivery header was absent or empty."""

    def __init__(self, message: str, header: str):
        super().__init__("MISSING_HEADER", message, details={"header": header})


class BodyUnavailableError(WebhookError):
    """The request body could not be obtained."""

    def __init__(self, message: str):
        super().__init__("BODY_UNAVAILABLE", message)


class SignatureMismatchError(WebhookError):
    """The claimed signature did not match the body."""

    def __init__(self, message: str = "Failed to verify signature"):
        super().__init__("SIGNATURE_MISMATCH", message)


class PayloadDecodeError(WebhookError):
    """The body could not be decoded into a structured payload."""

    def __init__(self, message: str):
        super().__init__("PAYLOAD_DECODE_ERROR", message)

"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Webhook endpoint
    webhook_path: str = "/webhooks/github"
    webhook_secret: str = ""

    # Header names (case-insensitive)
    delivery_header: str = "x-github-delivery"
    event_header: str = "x-github-event"
    signature_header: str = "x-hub-signature"
    signature_algorithm: str = "sha1"

    # "raw" reads the request stream, "parsed" expects an upstream body parser
    body_mode: str = "raw"

    # Emit under payload.repository.name as well
    emit_source: bool = True

    # Seconds to wait for the request body; 0 disables the limit
    body_timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "HOOKGATE_",
    }

    @property
    def effective_body_timeout(self) -> float | None:
        """Return the body read timeout, or None when disabled."""
        if self.body_timeout <= 0:
            return None
        return self.body_timeout


settings = Settings()

"""CLI entry point for the hookgate server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="hookgate-server",
        description="hookgate: signed webhook receiver",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: 8080)")
    parser.add_argument("--path", default=None, help="Webhook path (default: /webhooks/github)")
    parser.add_argument("--secret", default=None, help="Shared secret used to verify signatures")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Colored console logs instead of JSON",
    )
    args = parser.parse_args(argv)

    # Settings are read from the environment when hookgate.config is imported
    if args.path:
        os.environ["HOOKGATE_WEBHOOK_PATH"] = args.path
    if args.secret:
        os.environ["HOOKGATE_WEBHOOK_SECRET"] = args.secret
    if args.dev:
        os.environ["HOOKGATE_JSON_LOGS"] = "0"

    from hookgate.config import settings

    import uvicorn

    uvicorn.run(
        "hookgate.main:build_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()

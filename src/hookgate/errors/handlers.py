"""FastAPI exception handlers rendering hookgate errors."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hookgate.errors.exceptions import HookgateError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(HookgateError)
    async def hookgate_error_handler(request: Request, exc: HookgateError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
        )

"""Operational view of the webhook listener registry."""

from fastapi import APIRouter, Request

from hookgate.errors.exceptions import HookgateError

router = APIRouter(tags=["Webhooks"])


@router.get("/webhooks/listeners")
async def list_listeners(request: Request) -> dict:
    """Return the number of listeners registered per key."""
    emitter = getattr(request.app.state, "emitter", None)
    if emitter is None:
        raise HookgateError("NOT_CONFIGURED", "Webhook emitter not configured", status_code=503)
    return {
        "path": request.app.state.webhook_options.path,
        "listeners": {key: emitter.listener_count(key) for key in emitter.keys()},
        "pending": emitter.pending_tasks,
    }

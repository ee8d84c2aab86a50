"""Structured logging helpers and request-id propagation."""

import uuid
from contextvars import ContextVar
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def build_log_context(
    *,
    user_id: str | None = None,
    slot_id: str | None = None,
    swap_request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict (never includes names, emails or titles)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if slot_id:
        context["slot_id"] = slot_id
    if swap_request_id:
        context["swap_request_id"] = swap_request_id
    request_id = request_id_ctx.get()
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign (or propagate) a request id and echo it on the response."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

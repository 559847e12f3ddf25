from __future__ import annotations

from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request | None) -> str:
    if request is not None:
        cached = getattr(request.state, "request_id", None)
        if cached:
            return cached
        for header in ("x-request-id", "x-correlation-id"):
            value = request.headers.get(header)
            if value:
                return value
    return str(uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Pins one request id per request and echoes it on the response."""

    async def dispatch(self, request, call_next):
        request.state.request_id = get_request_id(request)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response

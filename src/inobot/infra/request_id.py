"""Request-ID tagging.

``RequestIdMiddleware`` honours an incoming ``X-Request-ID`` header or
generates one, stores it in a context variable for the log filter, and
echoes it on the response.
"""

from __future__ import annotations

from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .id_utils import PREFIX_REQUEST, generate_id

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INCOMING_LENGTH = 128

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def current_request_id() -> str:
    """Return the ID of the request being handled, or ``""`` outside one."""
    return _request_id.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = (
            incoming
            if incoming and len(incoming) <= _MAX_INCOMING_LENGTH
            else generate_id(PREFIX_REQUEST)
        )
        token = _request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

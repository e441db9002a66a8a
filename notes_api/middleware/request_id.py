"""
Notes API — Request ID Middleware
===================================

What:  Assigns a correlation ID to each request and echoes it in the response.
How:   Takes the client's X-Request-ID or generates a short one, stores it in a
       ContextVar (for loggers and exception handlers) and in request.state
       (for route handlers), and sets the X-Request-ID response header.
Who:   Applied to every request; error bodies carry the same ID as
       `request_id`, so a client can quote it when reporting a failure.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs longer than this are replaced, to keep log lines bounded
_MAX_CLIENT_ID_LENGTH = 64


def _new_request_id() -> str:
    # 8 hex chars is enough to correlate one request's log lines
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID when present and reasonably short
        2. Otherwise generate an 8-character ID
        3. Store it in `request_id_var` and `request.state.request_id`
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "")
        if not rid or len(rid) > _MAX_CLIENT_ID_LENGTH:
            rid = _new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

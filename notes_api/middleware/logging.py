"""
Notes API — Request Logging Middleware
========================================

What:  One access-log line per HTTP request.
How:   Measures wall time around the downstream call and logs method, path,
       status, duration, request ID, client IP and (when the access gate
       resolved one) the caller's account id.
Who:   Applied to every request except GET /health.

Log line:
    PUT /notes/update 403 4.2ms [3f9a1c72] from 10.0.0.7 account=5b0e...

Never logged: request or response bodies, query strings (they carry emails
and slugs), the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

_SKIP_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    # 5xx → ERROR, 4xx → WARNING, everything else → INFO
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Duration is measured from middleware entry to response return, so it
    includes password hashing on /auth routes and every database round trip.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")
        identity = getattr(request.state, "identity", None)
        account = str(identity.user_id) if identity is not None else "-"

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s] from %s account=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            account,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "account_id": account,
            },
        )

        return response

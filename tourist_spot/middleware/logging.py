"""
Tourist Spot API — Access Log Middleware
=========================================

What:  Gives each request a correlation id and writes one access-log line
       per request, including how the session cookie fared.
How:   The id comes from the client's X-Request-ID header or a fresh UUID4
       prefix. It lives in `request_id_var` for the rest of the request, so
       RequestIdFilter can stamp it on every log record, and is echoed in the
       response header.
When:  Right after the rate limiter, before anything that logs.

Access line:
    GET /tourist-spot/user/a@x.com 403 2.1ms [3f2a9c1e] from 10.0.0.7 session=invalid

    session is what require_session recorded on request.state:
        ok        verified token
        missing   no cookie
        expired   token past its exp
        invalid   bad signature or unparsable token
    Routes that never check a session log `session=-`.

Not logged: request bodies (spots carry owner emails) and cookie values.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tourist_spot.access")

# Coroutine-local: concurrent requests on one event loop each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdFilter(logging.Filter):
    """Adds `record.request_id` ("-" outside a request) for the log format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
    GET /health gets an id but no access line.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            start_time = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        if request.url.path != "/health":
            self._log_access(request, response.status_code, duration_ms, rid)
        return response

    @staticmethod
    def _log_access(request: Request, status: int, duration_ms: float, rid: str) -> None:
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        session = getattr(request.state, "session", None) or "-"
        logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s session=%s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            session,
            extra={"session": session, "duration_ms": round(duration_ms, 2)},
        )

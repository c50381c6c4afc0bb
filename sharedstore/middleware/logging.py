"""
sharedstore: Request Logging Middleware
==========================================

What:  One access-log line per request, tagged with the serving instance:
           App 2 Users API GET /users 200 3.2ms [a1b2c3d4] from 10.0.0.5
How:   Level follows the status class so failures stand out:
           5xx → ERROR, 4xx → WARNING, everything else → INFO
       Health probes are skipped; orchestrators poll them every few seconds.

Request bodies are never logged (they carry names and email addresses).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from sharedstore.middleware.request_id import request_id_var

logger = logging.getLogger("sharedstore.access")

SKIP_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        fields = {
            "service": request.app.title,
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for_status(response.status_code),
            "%(service)s %(method)s %(path)s %(status)d %(duration_ms).1fms "
            "[%(request_id)s] from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response

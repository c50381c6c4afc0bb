"""
sharedstore: Request ID Middleware
=====================================

What:  Tags every request with a correlation id and echoes it back in the
       X-Request-ID response header.
How:   Uses the client's X-Request-ID when present, otherwise a short random
       id; stores it in a ContextVar so log lines and exception handlers of
       the same request can reference it.

With several user-service instances behind one proxy, the id plus the
`app` field in the body tells an operator which instance served a request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

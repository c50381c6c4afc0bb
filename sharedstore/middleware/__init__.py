"""
sharedstore: Middleware Package
==================================

Cross-cutting concerns applied to every request of both services.

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access log line carries the id; the
    response passes back through both, picking up the X-Request-ID header.
"""

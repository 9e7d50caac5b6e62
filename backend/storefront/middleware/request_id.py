"""
Storefront Backend: Request ID Middleware
=========================================

What:  Assigns a correlation ID to every request.
How:   Reuses an inbound X-Request-ID header or generates a short UUID, stores
       it in a ContextVar (for loggers) and in request.state (for handlers).

Backend services echo the ID in the response X-Request-ID header. The gateway
builds this middleware with `expose_header=False`: proxied responses are
relayed exactly as the backend produced them, so the gateway forwards the ID
upstream instead of stamping it on the way back.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request with an ID for log correlation."""

    def __init__(self, app: ASGIApp, expose_header: bool = True):
        super().__init__(app)
        self.expose_header = expose_header

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        if self.expose_header:
            response.headers[REQUEST_ID_HEADER] = rid

        return response

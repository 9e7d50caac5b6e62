"""
Storefront Gateway: Route Handlers
==================================

What:  GET /health plus one catch-all handler that dispatches every other
       request through the route table.
How:   dispatch() is a short pipeline where each stage may end the request:

           match rule ──none──▶ 404 {"error": "Route not found", "path": ...}
               │
           auth gate (only when rule.auth_required) ──▶ 401 / 403
               │
           proxy ──▶ upstream response relayed, or 502 / 504

The route table, token verifier and proxy live on app.state; they are built
once by create_app().
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from storefront.exceptions import NotFoundError
from storefront.gateway.auth import authenticate
from storefront.gateway.routing import ANY_METHOD

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Gateway health check",
    description="Always healthy while the process is serving; upstreams are not probed.",
)
async def health_check(request: Request) -> dict:
    return {
        "status": "healthy",
        "service": request.app.state.settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.api_route(
    "/{full_path:path}",
    methods=sorted(ANY_METHOD),
    include_in_schema=False,
)
async def dispatch(request: Request):
    state = request.app.state
    path = request.url.path

    rule = state.route_table.match(request.method, path)
    if rule is None:
        raise NotFoundError("Route not found", public={"path": path})

    if rule.auth_required:
        authenticate(request, state.token_verifier)

    return await state.proxy.forward(request, rule)

"""
Storefront Gateway: Application Factory
=======================================

What:  Builds the API gateway FastAPI application.
How:   create_app() wires settings, route table, token verifier and proxy
       onto app.state, then registers middleware, exception handlers and
       routes.

Request pipeline:
    ┌──────────┐  ┌─────────┐  ┌──────┐  ┌───────────┐  ┌───────┐  ┌──────────┐
    │ Req ID   │→ │ Logging │→ │ CORS │→ │ match rule│→ │ auth  │→ │ proxy    │
    └──────────┘  └─────────┘  └──────┘  └───────────┘  └───────┘  └──────────┘
                                              │ none
                                              ▼
                                        404 Route not found

Lifecycle:
    Startup:  configure logging, log upstreams, warn on default JWT secret
    Shutdown: close the shared httpx client (when the factory created it)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI

from storefront import __version__
from storefront.bootstrap import (
    install_common_middleware,
    register_exception_handlers,
    run_server,
    setup_logging,
)
from storefront.config import GatewaySettings
from storefront.gateway import routes
from storefront.gateway.auth import TokenVerifier
from storefront.gateway.proxy import ServiceProxy
from storefront.gateway.routing import build_route_table

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[GatewaySettings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create and configure the gateway application.

    Args:
        settings:    Gateway settings; read from the environment when omitted
        http_client: Shared upstream client; created (and closed on shutdown)
                     by the app when omitted
    """
    settings = settings or GatewaySettings()
    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(
        timeout=settings.proxy_timeout,
        follow_redirects=False,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(settings.log_level)
        logger.info("API Gateway running on %s:%d", settings.host, settings.port)
        logger.info("Health check: http://localhost:%d/health", settings.port)
        logger.info("User Service: %s", settings.user_service_url)
        logger.info("Product Service: %s", settings.product_service_url)
        for rule in app.state.route_table:
            logger.info(
                "Route %-15s %-20s auth=%s -> %s",
                rule.name,
                ",".join(sorted(rule.methods)),
                "required" if rule.auth_required else "none",
                rule.target,
            )
        if settings.uses_default_secret:
            logger.warning("JWT_SECRET is not set; using the development default")

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        if owns_client:
            await client.aclose()
        logger.info("API Gateway shut down")

    # Docs are disabled: every unmatched path, /docs included, belongs to the 404 handler
    app = FastAPI(
        title="Storefront API Gateway",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.route_table = build_route_table(settings)
    app.state.token_verifier = TokenVerifier(settings.jwt_secret, settings.jwt_algorithm)
    app.state.proxy = ServiceProxy(client, timeout=settings.proxy_timeout)

    install_common_middleware(app, settings, expose_request_id=False)
    register_exception_handlers(app)
    app.include_router(routes.router)

    return app


def run() -> None:
    """Console entry point: `storefront-gateway`."""
    run_server("storefront.gateway.main:app", GatewaySettings())


app = create_app()

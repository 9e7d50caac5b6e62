"""
Storefront Cart: Application Factory
====================================

What:  Builds the cart service.
How:   create_app() creates (or accepts) the Redis client and the httpx
       client for the product service, wires CartStore → ProductClient →
       CartService onto app.state, and registers the shared plumbing.

Lifecycle:
    Startup:  configure logging, ping Redis (a failure is logged, not fatal;
              /health reports it)
    Shutdown: close the clients the factory created
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import redis.asyncio as redis
from fastapi import FastAPI

from storefront import __version__
from storefront.bootstrap import (
    install_common_middleware,
    register_exception_handlers,
    run_server,
    setup_logging,
)
from storefront.cart import routes
from storefront.cart.product_client import ProductClient
from storefront.cart.service import CartService
from storefront.cart.store import CartStore
from storefront.config import CartSettings

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[CartSettings] = None,
    redis_client: Optional[redis.Redis] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create the cart service; injected clients are not closed on shutdown."""
    settings = settings or CartSettings()
    owns_redis = redis_client is None
    owns_http = http_client is None
    redis_client = redis_client or redis.Redis.from_url(settings.redis_url, decode_responses=True)
    http_client = http_client or httpx.AsyncClient(timeout=settings.product_timeout)

    store = CartStore(redis_client, ttl_seconds=settings.cart_ttl_seconds)
    products = ProductClient(http_client, settings.product_service_url, timeout=settings.product_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level)
        if await store.ping():
            logger.info("Connected to Redis")
        else:
            logger.error("Redis is unreachable at startup; cart requests will fail until it recovers")
        logger.info("Cart service running on %s:%d", settings.host, settings.port)
        logger.info("Health check: http://localhost:%d/health", settings.port)
        logger.info("Product Service: %s", settings.product_service_url)

        yield

        if owns_http:
            await http_client.aclose()
        if owns_redis:
            await redis_client.aclose()
        logger.info("Cart service shut down")

    app = FastAPI(
        title="Storefront Cart Service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cart_store = store
    app.state.cart_service = CartService(store, products)

    install_common_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(routes.router)

    return app


def run() -> None:
    """Console entry point: `storefront-cart`."""
    run_server("storefront.cart.main:app", CartSettings())


app = create_app()

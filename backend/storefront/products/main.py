"""
Storefront Products: Application Factory
========================================

What:  Builds the product catalog service (in-memory, one store per process).
How:   create_app() attaches a ProductStore to app.state, optionally seeded
       with the demo catalog, then registers the shared middleware, exception
       handlers and the product routes.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from storefront import __version__
from storefront.bootstrap import (
    install_common_middleware,
    register_exception_handlers,
    run_server,
    setup_logging,
)
from storefront.config import ProductSettings
from storefront.products import routes
from storefront.products.store import ProductStore, seed_products

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[ProductSettings] = None,
    store: Optional[ProductStore] = None,
) -> FastAPI:
    """Create the product service; `store` overrides the seeded catalog."""
    settings = settings or ProductSettings()
    if store is None:
        store = ProductStore(seed_products() if settings.seed_catalog else [])

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level)
        logger.info("Product service running on %s:%d", settings.host, settings.port)
        logger.info("Health check: http://localhost:%d/health", settings.port)
        yield
        logger.info("Product service shut down")

    app = FastAPI(
        title="Storefront Product Service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    install_common_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(routes.router)

    return app


def run() -> None:
    """Console entry point: `storefront-products`."""
    run_server("storefront.products.main:app", ProductSettings())


app = create_app()

"""
Storefront Backend: Shared Application Bootstrap
================================================

What:  Logging setup, global exception handlers, common middleware and the
       uvicorn launcher used by every service's create_app()/run().
How:   Each service factory calls these in order:

           setup_logging(settings.log_level)       (in lifespan)
           install_common_middleware(app, settings)
           register_exception_handlers(app)

Error response contract (all services):
    {"error": "<message>"}                 optionally with extra fields
    StorefrontError subclasses → their own status code
    RequestValidationError     → 400 (malformed JSON / wrong field types)
    HTTPException              → its status (405 on unknown methods, ...)
    anything else              → 500, traceback logged server-side only
"""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.config import ServiceSettings
from storefront.exceptions import StorefrontError
from storefront.middleware.logging import RequestLoggingMiddleware
from storefront.middleware.request_id import RequestIDMiddleware, request_id_var

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once per process.

    Format: 2024-01-15T12:00:00 [INFO] storefront.access: ← GET /health - 200 - 0.4ms
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Middleware
# ══════════════════════════════════════════════════════════════════════════

def install_common_middleware(
    app: FastAPI,
    settings: ServiceSettings,
    expose_request_id: bool = True,
) -> None:
    """
    Register CORS, request logging and request ID middleware.

    Execution order is the reverse of registration:
        Request ID → Logging → CORS → routes
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware, expose_header=expose_request_id)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to `{"error": ...}` JSON responses."""

    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, type(exc).__name__, exc.message, exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Server Launcher
# ══════════════════════════════════════════════════════════════════════════

def run_server(app_path: str, settings: ServiceSettings) -> None:
    """Start uvicorn for `app_path` (e.g. "storefront.gateway.main:app")."""
    uvicorn.run(
        app_path,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )

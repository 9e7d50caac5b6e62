"""
Storefront Backend: Middleware Package
======================================

Cross-cutting concerns shared by every service.

Middleware chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

Starlette runs middleware in reverse order of registration, so
bootstrap.install_common_middleware() adds CORS first and Request ID last.
"""

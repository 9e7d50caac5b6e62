"""
Storefront Backend: Exception Hierarchy
=======================================

What:  Application exceptions, each bound to one HTTP status code.
How:   Every exception carries a client-safe message, optional public fields
       that are merged into the response body, and a private context dict
       that is only logged. The global handlers in bootstrap.py turn them
       into `{"error": message, **public}` JSON responses.

Exception Hierarchy:
    StorefrontError (base)            → 500
    ├── ValidationError               → 400 Bad Request
    ├── UnauthenticatedError          → 401 Unauthorized (no token)
    ├── ForbiddenError                → 403 Forbidden (bad/expired token)
    ├── NotFoundError                 → 404 Not Found
    ├── StorageError                  → 500 Internal Server Error
    ├── UpstreamUnavailableError      → 502 Bad Gateway
    └── UpstreamTimeoutError          → 504 Gateway Timeout
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """
    Base exception for all Storefront application errors.

    Attributes:
        message:  User-facing error description (returned as `error`)
        public:   Extra fields returned alongside `error` in the body
        context:  Debug info for server-side logs, never returned
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Internal server error",
        public: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.public = public or {}
        self.context = context or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        """Response body: the message under `error` plus any public fields."""
        return {"error": self.message, **self.public}


class ValidationError(StorefrontError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request
    When: Missing required fields, negative prices, insufficient stock.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthenticatedError(StorefrontError):
    """No bearer token was presented on a protected route. HTTP 401."""

    status_code = 401

    def __init__(self, message: str = "Access token required", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ForbiddenError(StorefrontError):
    """A bearer token was presented but failed signature or expiry checks. HTTP 403."""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotFoundError(StorefrontError):
    """
    Raised when a requested resource or route does not exist.

    HTTP: 404 Not Found

    The gateway's catch-all passes `public={"path": ...}` so the body reads
    `{"error": "Route not found", "path": "/api/unknown"}`.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Resource not found",
        public: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, public=public, context=context)


class StorageError(StorefrontError):
    """
    Raised when the key-value store cannot be read or written.

    HTTP: 500 Internal Server Error
    The Redis error text goes to `context` (logged), not to the client.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Failed to access cart storage",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamUnavailableError(StorefrontError):
    """
    Raised when a downstream service cannot be reached or answers badly.

    HTTP: 502 Bad Gateway
    When: Connection refused, DNS failure, protocol error. One attempt only.
    """

    status_code = 502

    def __init__(
        self,
        message: str = "Upstream service unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamTimeoutError(UpstreamUnavailableError):
    """The single upstream attempt exceeded its timeout. HTTP 504."""

    status_code = 504

    def __init__(
        self,
        message: str = "Upstream service timed out",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

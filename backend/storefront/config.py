"""
Storefront Backend: Service Configuration
=========================================

What:  Typed settings for every service, loaded from environment variables.
How:   Pydantic Settings reads env vars (or a .env file), coerces types and
       validates ranges when the settings object is created.
Who:   Each service's main.py builds its own settings singleton; factories
       accept an explicit instance so tests never touch the environment.

Settings hierarchy:
    ServiceSettings (host, port, log level, CORS)
    ├── GatewaySettings   PORT=3000, JWT + upstream URLs + proxy timeout
    ├── ProductSettings   PORT=3002, catalog seeding
    └── CartSettings      PORT=3003, Redis + product service + cart TTL

Every service process reads the same `PORT` variable; the subclass only
changes the default.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "your-secret-key-change-this"


class ServiceSettings(BaseSettings):
    """
    Settings shared by all services.

    Attributes are grouped by concern; subclasses override `service_name`
    and the `port` default.
    """

    service_name: str = Field(default="storefront")

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class GatewaySettings(ServiceSettings):
    """Settings for the API gateway (routing table targets and token checks)."""

    service_name: str = Field(default="api-gateway")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Authentication ────────────────────────────────────────────────────
    # Shared secret used to verify bearer tokens (issued elsewhere)
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")

    # ── Upstream Services ─────────────────────────────────────────────────
    user_service_url: str = Field(default="http://localhost:3001")
    product_service_url: str = Field(default="http://localhost:3002")

    # Seconds allowed for the single proxied attempt (connect + read)
    proxy_timeout: float = Field(default=30.0, gt=0, le=300)

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


class ProductSettings(ServiceSettings):
    """Settings for the product catalog service."""

    service_name: str = Field(default="product-service")
    port: int = Field(default=3002, ge=1, le=65535)

    # Load the two demo products on startup
    seed_catalog: bool = Field(default=True)


class CartSettings(ServiceSettings):
    """Settings for the cart service."""

    service_name: str = Field(default="cart-service")
    port: int = Field(default=3003, ge=1, le=65535)

    # ── Redis ─────────────────────────────────────────────────────────────
    redis_url: str = Field(default="redis://localhost:6379")

    # Flat expiry applied on every cart write (24 hours)
    cart_ttl_seconds: int = Field(default=86400, ge=1)

    # ── Product Service ───────────────────────────────────────────────────
    product_service_url: str = Field(default="http://localhost:3002")
    product_timeout: float = Field(default=10.0, gt=0, le=120)

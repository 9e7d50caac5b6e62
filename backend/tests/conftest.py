"""
Storefront Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every app is built through its create_app() factory with explicit
       settings and injected clients, so no test needs a running Redis,
       product service or user service.

Note: httpx's ASGITransport does not run the lifespan, which is why clients
are injected instead of created at startup.

Fixture overview:
    gateway_settings / product_settings / cart_settings   typed settings
    make_token                                             signs test JWTs
    fake_redis                                             dict-backed AsyncMock
    gateway_client / products_client / cart_client         AsyncClient per app
"""

import os
import time
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import httpx
import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the module-level `app` objects quiet and off real infrastructure
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("REDIS_URL", "redis://localhost:6399/15")

from storefront.config import CartSettings, GatewaySettings, ProductSettings  # noqa: E402

TEST_JWT_SECRET = "test-secret"
USER_SERVICE_URL = "http://users.test"
PRODUCT_SERVICE_URL = "http://products.test"


# ══════════════════════════════════════════════════════════════════════════
# Settings
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        jwt_secret=TEST_JWT_SECRET,
        user_service_url=USER_SERVICE_URL,
        product_service_url=PRODUCT_SERVICE_URL,
        proxy_timeout=5,
        log_level="WARNING",
    )


@pytest.fixture
def product_settings() -> ProductSettings:
    return ProductSettings(seed_catalog=True, log_level="WARNING")


@pytest.fixture
def cart_settings() -> CartSettings:
    return CartSettings(product_service_url=PRODUCT_SERVICE_URL, log_level="WARNING")


# ══════════════════════════════════════════════════════════════════════════
# Tokens
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_token():
    """
    Factory for signed bearer tokens.

    Usage:
        token = make_token()                       # valid for one hour
        token = make_token(expires_in=-60)         # already expired
        token = make_token(secret="other-secret")  # wrong signature
    """

    def _make(
        sub: str = "user-1",
        expires_in: Optional[int] = 3600,
        secret: str = TEST_JWT_SECRET,
        **claims: Any,
    ) -> str:
        payload: Dict[str, Any] = {"sub": sub, "email": f"{sub}@example.com", **claims}
        if expires_in is not None:
            payload["exp"] = int(time.time()) + expires_in
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Redis
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_redis():
    """
    An AsyncMock standing in for redis.asyncio.Redis.

    get/set/ping behave like a tiny in-memory Redis; the backing dict is
    exposed as `fake_redis.data` and every call stays inspectable through the
    usual mock assertions.
    """
    data: Dict[str, str] = {}

    async def _get(key):
        return data.get(key)

    async def _set(key, value, ex=None):
        data[key] = value
        return True

    client = AsyncMock()
    client.data = data
    client.get = AsyncMock(side_effect=_get)
    client.set = AsyncMock(side_effect=_set)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


# ══════════════════════════════════════════════════════════════════════════
# HTTP clients
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def upstream_http():
    """Real httpx client for the apps' outbound calls; respx intercepts it."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest_asyncio.fixture
async def gateway_client(gateway_settings, upstream_http):
    from storefront.gateway.main import create_app

    app = create_app(gateway_settings, http_client=upstream_http)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://gateway") as client:
        yield client


@pytest_asyncio.fixture
async def products_client(product_settings):
    from storefront.products.main import create_app

    app = create_app(product_settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://products") as client:
        yield client


@pytest_asyncio.fixture
async def cart_client(cart_settings, fake_redis, upstream_http):
    from storefront.cart.main import create_app

    app = create_app(cart_settings, redis_client=fake_redis, http_client=upstream_http)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://cart") as client:
        yield client

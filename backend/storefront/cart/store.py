"""
Storefront Cart: Redis Cart Store
=================================

What:  Persists one JSON cart document per user in Redis.
How:   Key `cart:{userId}`; every write is a SET with EX=CART_TTL_SECONDS, so a
       cart expires 24 hours (by default) after its last change. A missing
       key reads as an empty cart. There is no eviction policy beyond the
       TTL and no invalidation when product prices change.

Failure handling:
    Redis errors and undecodable documents are logged with the key and raised
    as StorageError (500); the client gets a generic message.
"""

import logging

import redis.asyncio as redis
from pydantic import ValidationError as SchemaError
from redis.exceptions import RedisError

from storefront.cart.schemas import Cart
from storefront.exceptions import StorageError

logger = logging.getLogger(__name__)


class CartStore:
    """Async Redis-backed cart persistence."""

    KEY_PREFIX = "cart:"

    def __init__(self, client: redis.Redis, ttl_seconds: int = 86400):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def key(cls, user_id: str) -> str:
        return f"{cls.KEY_PREFIX}{user_id}"

    async def get(self, user_id: str) -> Cart:
        key = self.key(user_id)
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            logger.error("Error getting cart %s: %s", key, e)
            raise StorageError("Failed to get cart", context={"key": key, "error": str(e)}) from e

        if not raw:
            return Cart.empty(user_id)

        try:
            return Cart.model_validate_json(raw)
        except SchemaError as e:
            logger.error("Corrupt cart document at %s: %s", key, e)
            raise StorageError("Failed to get cart", context={"key": key}) from e

    async def save(self, cart: Cart) -> None:
        key = self.key(cart.user_id)
        try:
            await self.client.set(key, cart.model_dump_json(by_alias=True), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error("Error saving cart %s: %s", key, e)
            raise StorageError("Failed to save cart", context={"key": key, "error": str(e)}) from e

    async def ping(self) -> bool:
        """True when Redis answers PING."""
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            logger.warning("Redis ping failed: %s", e)
            return False

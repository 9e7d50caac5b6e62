"""
Storefront Cart: Schemas
========================

What:  Cart documents (stored in Redis and returned by the API), request
       bodies, and the slice of the product service's response the cart uses.
How:   camelCase on the wire and in Redis (productId, userId, itemCount),
       snake_case in Python.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItem(CamelModel):
    """One cart line; subtotal is price × quantity at the time of the last change."""

    product_id: str
    name: str
    price: float
    quantity: int
    subtotal: float


class Cart(CamelModel):
    """A user's cart. total and item_count are derived from items."""

    user_id: str
    items: List[CartItem] = Field(default_factory=list)
    total: float = 0
    item_count: int = 0

    @classmethod
    def empty(cls, user_id: str) -> "Cart":
        return cls(user_id=user_id)

    def find_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def recalculate(self) -> "Cart":
        """Recompute total (Σ subtotal) and item_count (Σ quantity)."""
        self.total = sum(item.subtotal for item in self.items)
        self.item_count = sum(item.quantity for item in self.items)
        return self


class ProductDetails(BaseModel):
    """Fields of GET /products/{id} the cart depends on; the rest is ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    price: float
    stock: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


def _int_or_none(v: Any) -> Any:
    # Non-integral quantities reach CartService as missing and get its 400 message
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v)
    return None


class AddItemRequest(CamelModel):
    """Body of POST /cart/items; presence and range are checked by CartService."""

    product_id: Optional[str] = None
    quantity: Optional[int] = None

    normalize_quantity = field_validator("quantity", mode="before")(_int_or_none)

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v: Any) -> Any:
        # Numeric ids are accepted and treated as their decimal string
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class UpdateItemRequest(CamelModel):
    """Body of PUT /cart/items/{productId}."""

    quantity: Optional[int] = None

    normalize_quantity = field_validator("quantity", mode="before")(_int_or_none)


class CartResponse(CamelModel):
    message: str
    cart: Cart


class HealthResponse(CamelModel):
    status: str
    service: str
    redis: str
    timestamp: Optional[datetime] = None

"""
Storefront Products: Request/Response Schemas
=============================================

What:  Pydantic models for the product catalog API.
How:   Fields are snake_case in Python and camelCase on the wire
       (createdAt, updatedAt, productId) through an alias generator.

Request bodies are deliberately loose (every field optional, numbers
accepted as numeric strings): required-field and range rules are business
rules enforced by ProductStore so that they answer 400 with an `error`
message instead of a schema error.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(CamelModel):
    """A catalog entry as stored and returned."""

    id: str = Field(description="Catalog identifier (decimal string)")
    name: str
    description: str = ""
    price: float = Field(description="Unit price")
    category: str
    stock: int = Field(default=0, description="Units available")
    created_at: datetime
    updated_at: datetime


class ProductInput(CamelModel):
    """Body of POST /products and PUT /products/{id}."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    stock: Optional[int] = None


class ProductListResponse(CamelModel):
    total: int
    products: List[Product]


class ProductMutationResponse(CamelModel):
    message: str
    product: Product


class MessageResponse(CamelModel):
    message: str


class StockResponse(CamelModel):
    """Stock lookup for one product; `available` is stock > 0."""

    product_id: str
    name: str
    stock: int
    available: bool


class HealthResponse(CamelModel):
    status: str
    service: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable error message")

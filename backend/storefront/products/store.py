"""
Storefront Products: In-Memory Catalog Store
===========================================

What:  The single owned product catalog for one service process.
How:   A list of Product models guarded by a threading.Lock. Route handlers
       are plain `def` functions, which FastAPI runs in its worker thread
       pool, so every read and write goes through the lock. Callers receive
       copies; the stored models are only mutated under the lock.

Identifiers are decimal strings issued from a counter that only moves
forward, so an id is never reused after a delete.

Validation rules:
    create: name, price and category must be present and truthy
            → "Name, price, and category are required"
            price < 0 or stock < 0 → "Price and stock must be positive"
    update: unknown id → 404 before any value check; only truthy
            name/description/price/category are applied;
            stock is applied whenever it is provided (0 included)
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from storefront.exceptions import NotFoundError, ValidationError
from storefront.products.schemas import Product, ProductInput, StockResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, price, and category are required"
NEGATIVE_VALUES_MESSAGE = "Price and stock must be positive"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def seed_products() -> List[Product]:
    """Demo catalog loaded when SEED_CATALOG is enabled."""
    now = _now()
    return [
        Product(
            id="1",
            name="Laptop",
            description="High-performance laptop",
            price=999.99,
            category="Electronics",
            stock=50,
            created_at=now,
            updated_at=now,
        ),
        Product(
            id="2",
            name="Smartphone",
            description="Latest model smartphone",
            price=699.99,
            category="Electronics",
            stock=100,
            created_at=now,
            updated_at=now,
        ),
    ]


class ProductStore:
    """Thread-safe in-memory product catalog."""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._lock = threading.Lock()
        self._products: List[Product] = list(products or [])
        numeric_ids = [int(p.id) for p in self._products if p.id.isdigit()]
        self._next_id = max(numeric_ids, default=0) + 1

    def _find(self, product_id: str) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise NotFoundError("Product not found", context={"product_id": product_id})

    def list(self, category: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
        """Products filtered by exact category and name substring, both case-insensitive."""
        with self._lock:
            products = list(self._products)

        if category:
            products = [p for p in products if p.category.lower() == category.lower()]
        if search:
            needle = search.lower()
            products = [p for p in products if needle in p.name.lower()]

        return [p.model_copy() for p in products]

    def get(self, product_id: str) -> Product:
        with self._lock:
            return self._find(product_id).model_copy()

    def create(self, data: ProductInput) -> Product:
        if not data.name or not data.price or not data.category:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
        if data.price < 0 or (data.stock is not None and data.stock < 0):
            raise ValidationError(NEGATIVE_VALUES_MESSAGE)

        with self._lock:
            now = _now()
            product = Product(
                id=str(self._next_id),
                name=data.name,
                description=data.description or "",
                price=data.price,
                category=data.category,
                stock=data.stock or 0,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._products.append(product)

        logger.info("Created product %s (%s)", product.id, product.name)
        return product.model_copy()

    def update(self, product_id: str, data: ProductInput) -> Product:
        with self._lock:
            # An unknown id answers 404 before the body is looked at
            product = self._find(product_id)
            if (data.price is not None and data.price < 0) or (data.stock is not None and data.stock < 0):
                raise ValidationError(NEGATIVE_VALUES_MESSAGE)
            if data.name:
                product.name = data.name
            if data.description:
                product.description = data.description
            if data.price:
                product.price = data.price
            if data.category:
                product.category = data.category
            if data.stock is not None:
                product.stock = data.stock
            product.updated_at = _now()
            updated = product.model_copy()

        logger.info("Updated product %s", product_id)
        return updated

    def delete(self, product_id: str) -> None:
        with self._lock:
            product = self._find(product_id)
            self._products.remove(product)
        logger.info("Deleted product %s", product_id)

    def stock(self, product_id: str) -> StockResponse:
        product = self.get(product_id)
        return StockResponse(
            product_id=product.id,
            name=product.name,
            stock=product.stock,
            available=product.stock > 0,
        )

"""
Storefront Cart: Cart Service (Business Logic)
==============================================

What:  Cart operations: read, add, change quantity, remove, clear.
How:   Composes CartStore (Redis) and ProductClient (product service).
       Every mutation follows the same sequence:

           validate input → (fetch product, check stock) → load cart
           → mutate lines → recalculate totals → save (refreshes TTL)

       Any failure before the save leaves the stored cart untouched.

Error Handling:
    ValidationError           400  bad input, insufficient stock
    NotFoundError             404  unknown product, line not in cart
    UpstreamUnavailableError  502  product service unreachable
    StorageError              500  Redis failure

An existing line keeps the price captured when it was first added; only the
quantity and subtotal change afterwards.
"""

import logging
from typing import Optional

from storefront.cart.product_client import ProductClient
from storefront.cart.schemas import Cart, CartItem
from storefront.cart.store import CartStore
from storefront.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

INSUFFICIENT_STOCK_MESSAGE = "Insufficient stock"


class CartService:
    """Stateless orchestrator; all state lives in Redis."""

    def __init__(self, store: CartStore, products: ProductClient):
        self.store = store
        self.products = products

    async def get_cart(self, user_id: str) -> Cart:
        return await self.store.get(user_id)

    async def add_item(self, user_id: str, product_id: Optional[str], quantity: Optional[int]) -> Cart:
        """
        Add `quantity` units of a product, merging with an existing line.

        The stock check compares the requested quantity with the product's
        current stock.

        Raises:
            ValidationError: missing productId, quantity < 1, insufficient stock
            NotFoundError: product does not exist
        """
        if not product_id or quantity is None or quantity < 1:
            raise ValidationError("Valid productId and quantity are required")

        product = await self.products.get_product(product_id)
        if product.stock < quantity:
            raise ValidationError(
                INSUFFICIENT_STOCK_MESSAGE,
                context={"product_id": product_id, "stock": product.stock, "requested": quantity},
            )

        cart = await self.store.get(user_id)
        existing = cart.find_item(product_id)
        if existing:
            existing.quantity += quantity
            existing.subtotal = existing.price * existing.quantity
        else:
            cart.items.append(
                CartItem(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=quantity,
                    subtotal=product.price * quantity,
                )
            )

        cart.recalculate()
        await self.store.save(cart)
        logger.info("User %s added %d x product %s", user_id, quantity, product_id)
        return cart

    async def update_item(self, user_id: str, product_id: str, quantity: Optional[int]) -> Cart:
        """
        Set a line's quantity; 0 removes the line.

        Raises:
            ValidationError: quantity missing or negative, insufficient stock
            NotFoundError: line not in cart, or product gone from the catalog
        """
        if quantity is None or quantity < 0:
            raise ValidationError("Quantity must be non-negative")

        cart = await self.store.get(user_id)
        item = cart.find_item(product_id)
        if item is None:
            raise NotFoundError("Item not found in cart", context={"product_id": product_id})

        if quantity == 0:
            cart.items.remove(item)
        else:
            product = await self.products.get_product(product_id)
            if product.stock < quantity:
                raise ValidationError(
                    INSUFFICIENT_STOCK_MESSAGE,
                    context={"product_id": product_id, "stock": product.stock, "requested": quantity},
                )
            item.quantity = quantity
            item.subtotal = item.price * quantity

        cart.recalculate()
        await self.store.save(cart)
        return cart

    async def remove_item(self, user_id: str, product_id: str) -> Cart:
        cart = await self.store.get(user_id)
        item = cart.find_item(product_id)
        if item is None:
            raise NotFoundError("Item not found in cart", context={"product_id": product_id})

        cart.items.remove(item)
        cart.recalculate()
        await self.store.save(cart)
        return cart

    async def clear_cart(self, user_id: str) -> Cart:
        # An empty document is written (not deleted) so the TTL restarts
        cart = Cart.empty(user_id)
        await self.store.save(cart)
        return cart

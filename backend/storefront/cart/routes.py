"""
Storefront Cart: Route Handlers
===============================

Route Inventory:
    GET    /health                    Redis-aware health check
    GET    /cart                      current cart
    POST   /cart/items                add {productId, quantity}
    PUT    /cart/items/{productId}    set {quantity}; 0 removes the line
    DELETE /cart/items/{productId}    remove one line
    DELETE /cart                      empty the cart

The user is identified by the `x-user-id` header (default "user123"); no
token is decoded here.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from storefront.cart.schemas import (
    AddItemRequest,
    Cart,
    CartResponse,
    HealthResponse,
    UpdateItemRequest,
)
from storefront.cart.service import CartService

router = APIRouter()

DEFAULT_USER_ID = "user123"


def get_user_id(x_user_id: str = Header(default=DEFAULT_USER_ID, alias="x-user-id")) -> str:
    return x_user_id or DEFAULT_USER_ID


def get_cart_service(request: Request) -> CartService:
    return request.app.state.cart_service


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    service_name = request.app.state.settings.service_name
    if await request.app.state.cart_store.ping():
        return HealthResponse(
            status="healthy",
            service=service_name,
            redis="connected",
            timestamp=datetime.now(timezone.utc),
        )
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "service": service_name, "redis": "disconnected"},
    )


@router.get("/cart", response_model=Cart, tags=["Cart"])
async def get_cart(
    user_id: str = Depends(get_user_id),
    service: CartService = Depends(get_cart_service),
) -> Cart:
    return await service.get_cart(user_id)


@router.post("/cart/items", response_model=CartResponse, tags=["Cart"])
async def add_item(
    body: AddItemRequest,
    user_id: str = Depends(get_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    cart = await service.add_item(user_id, body.product_id, body.quantity)
    return CartResponse(message="Item added to cart", cart=cart)


@router.put("/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def update_item(
    product_id: str,
    body: UpdateItemRequest,
    user_id: str = Depends(get_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    cart = await service.update_item(user_id, product_id, body.quantity)
    return CartResponse(message="Cart item updated", cart=cart)


@router.delete("/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def remove_item(
    product_id: str,
    user_id: str = Depends(get_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    cart = await service.remove_item(user_id, product_id)
    return CartResponse(message="Item removed from cart", cart=cart)


@router.delete("/cart", response_model=CartResponse, tags=["Cart"])
async def clear_cart(
    user_id: str = Depends(get_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartResponse:
    cart = await service.clear_cart(user_id)
    return CartResponse(message="Cart cleared", cart=cart)

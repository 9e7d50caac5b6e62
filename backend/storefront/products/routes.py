"""
Storefront Products: Route Handlers
===================================

Route Inventory:
    GET    /health                 service health
    GET    /products               list (filters: category, search)
    GET    /products/{id}          single product
    POST   /products               create → 201
    PUT    /products/{id}          partial update
    DELETE /products/{id}          delete
    GET    /products/{id}/stock    stock lookup

Handlers are thin: they pull the store from app.state and let
ValidationError / NotFoundError propagate to the global handlers.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from storefront.products.schemas import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    Product,
    ProductInput,
    ProductListResponse,
    ProductMutationResponse,
    StockResponse,
)
from storefront.products.store import ProductStore

router = APIRouter()

_not_found = {404: {"description": "Product not found", "model": ErrorResponse}}


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(request: Request) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=request.app.state.settings.service_name,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/products", response_model=ProductListResponse, tags=["Products"])
def list_products(
    category: Optional[str] = Query(default=None, description="Exact category, case-insensitive"),
    search: Optional[str] = Query(default=None, description="Substring of the product name"),
    store: ProductStore = Depends(get_store),
) -> ProductListResponse:
    products = store.list(category=category, search=search)
    return ProductListResponse(total=len(products), products=products)


@router.get("/products/{product_id}", response_model=Product, responses=_not_found, tags=["Products"])
def get_product(product_id: str, store: ProductStore = Depends(get_store)) -> Product:
    return store.get(product_id)


@router.post(
    "/products",
    status_code=201,
    response_model=ProductMutationResponse,
    responses={400: {"description": "Invalid product", "model": ErrorResponse}},
    tags=["Products"],
)
def create_product(data: ProductInput, store: ProductStore = Depends(get_store)) -> ProductMutationResponse:
    product = store.create(data)
    return ProductMutationResponse(message="Product created successfully", product=product)


@router.put(
    "/products/{product_id}",
    response_model=ProductMutationResponse,
    responses=_not_found,
    tags=["Products"],
)
def update_product(
    product_id: str,
    data: ProductInput,
    store: ProductStore = Depends(get_store),
) -> ProductMutationResponse:
    product = store.update(product_id, data)
    return ProductMutationResponse(message="Product updated successfully", product=product)


@router.delete("/products/{product_id}", response_model=MessageResponse, responses=_not_found, tags=["Products"])
def delete_product(product_id: str, store: ProductStore = Depends(get_store)) -> MessageResponse:
    store.delete(product_id)
    return MessageResponse(message="Product deleted successfully")


@router.get("/products/{product_id}/stock", response_model=StockResponse, responses=_not_found, tags=["Products"])
def product_stock(product_id: str, store: ProductStore = Depends(get_store)) -> StockResponse:
    return store.stock(product_id)

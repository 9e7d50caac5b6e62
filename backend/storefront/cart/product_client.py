"""
Storefront Cart: Product Service Client
=======================================

What:  Looks up price and stock for one product.
How:   GET {PRODUCT_SERVICE_URL}/products/{id} over a shared httpx client,
       one attempt, bounded by PRODUCT_TIMEOUT.

Error translation:
    404                            → NotFoundError("Product not found")
    any other status / bad JSON /
    connection error / timeout     → UpstreamUnavailableError("Failed to fetch product details")
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError as SchemaError

from storefront.cart.schemas import ProductDetails
from storefront.exceptions import NotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch product details"


class ProductClient:
    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float = 10.0):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout)

    def product_url(self, product_id: str) -> str:
        return f"{self.base_url}/products/{quote(product_id, safe='')}"

    async def get_product(self, product_id: str) -> ProductDetails:
        url = self.product_url(product_id)
        try:
            response = await self.client.get(url, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("Product service request failed for %s: %s", url, type(e).__name__)
            raise UpstreamUnavailableError(FETCH_FAILED_MESSAGE, context={"url": url}) from e

        if response.status_code == 404:
            raise NotFoundError("Product not found", context={"product_id": product_id})
        if response.status_code != 200:
            logger.error("Product service answered %d for %s", response.status_code, url)
            raise UpstreamUnavailableError(
                FETCH_FAILED_MESSAGE,
                context={"url": url, "status": response.status_code},
            )

        try:
            return ProductDetails.model_validate_json(response.content)
        except SchemaError as e:
            logger.error("Unexpected product payload from %s: %s", url, e)
            raise UpstreamUnavailableError(FETCH_FAILED_MESSAGE, context={"url": url}) from e

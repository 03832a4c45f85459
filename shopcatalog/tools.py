"""MCP tools for the Shopify catalog.

Thin adapters over ``CatalogService``:
1. check_store_health - Report whether the Shopify Admin API answers
2. search_products - Search products with filters, sort and pages
3. lookup_product - Get one product with all of its variants
4. list_locations - List store locations
5. create_product - Create a product and wait for its id

Each method returns a JSON-ready dict with a ``success`` flag; catalog
errors are reported in ``error`` instead of being raised.
"""

from decimal import Decimal
from typing import Any

import structlog
from pydantic import ValidationError

from shopcatalog.catalog.service import CatalogService
from shopcatalog.domain.exceptions import CatalogError
from shopcatalog.domain.models import CreateProductRequest, SearchFilters, SearchRequest

logger = structlog.get_logger()


def format_error(error: CatalogError) -> str:
    """Format a catalog error for MCP output."""
    return f"Error [{error.error_code}]: {error.message}"


def format_validation_error(error: ValidationError) -> str:
    """Format a request validation error for MCP output."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'request'}: {e['msg']}"
        for e in error.errors()
    )
    return f"Error [VALIDATION_ERROR]: {problems}"


def _failure(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}


class CatalogTools:
    """MCP tools for the Shopify catalog."""

    def __init__(self, service: CatalogService) -> None:
        """Initialize catalog tools.

        Args:
            service: Catalog service shared by every tool call.
        """
        self.service = service

    # =========================================================================
    # Tool 1: check-shopify-store-health
    # =========================================================================

    async def check_store_health(self) -> dict[str, Any]:
        """Check whether the Shopify Admin API is reachable.

        Returns:
            Health status, check time and an optional message.
        """
        health = await self.service.check_health()
        return {
            "success": health.status != "error",
            "status": health.status,
            "last_check": health.last_check.isoformat(),
            "message": health.message,
        }

    # =========================================================================
    # Tool 2: shopify-product-search
    # =========================================================================

    async def search_products(
        self,
        query: str | None = None,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        vendor: str | None = None,
        price_min: Decimal | None = None,
        price_max: Decimal | None = None,
        available_only: bool = True,
        sort: list[str] | None = None,
    ) -> dict[str, Any]:
        """Search products.

        Args:
            query: Free-text search (2-100 characters).
            page: Page number (default: 1).
            limit: Products per page (default: 10, max: 100).
            category: Product type filter.
            vendor: Vendor filter.
            price_min: Lowest variant price.
            price_max: Highest variant price.
            available_only: Only products with stock (default: true).
            sort: Sort entries such as ``"name,desc"``; only the first applies.

        Returns:
            Products and pagination metadata.
        """
        try:
            request = SearchRequest(
                query=query,
                page=page,
                limit=limit,
                filters=SearchFilters(
                    category=category,
                    vendor=vendor,
                    price_min=price_min,
                    price_max=price_max,
                    available_only=available_only,
                ),
                sort=sort or [],
            )
            result = await self.service.search(request)
        except ValidationError as e:
            return _failure(format_validation_error(e))
        except CatalogError as e:
            return _failure(format_error(e))

        meta = result.meta
        return {
            "success": True,
            "products": [p.model_dump(mode="json") for p in result.items],
            "pagination": meta.model_dump(),
            "message": f"Showing {len(result.items)} of {meta.total} products (page {meta.page}).",
        }

    # =========================================================================
    # Tool 3: shopify-product-lookup
    # =========================================================================

    async def lookup_product(self, product_id: str) -> dict[str, Any]:
        """Get a product with all of its variants.

        Args:
            product_id: Numeric product id or ``gid://shopify/Product/<id>``.

        Returns:
            Product details.
        """
        logger.info("Looking up product", product_id=product_id)

        try:
            product = await self.service.get_product(product_id)
        except CatalogError as e:
            return _failure(format_error(e))

        return {
            "success": True,
            "product": product.model_dump(mode="json"),
        }

    # =========================================================================
    # Tool 4: shopify-store-locations
    # =========================================================================

    async def list_locations(self) -> dict[str, Any]:
        """List store locations, e.g. to pick ids for initial inventory."""
        try:
            locations = await self.service.list_locations()
        except CatalogError as e:
            return _failure(format_error(e))

        return {
            "success": True,
            "locations": [loc.model_dump() for loc in locations],
            "count": len(locations),
        }

    # =========================================================================
    # Tool 5: shopify-product-create
    # =========================================================================

    async def create_product(
        self,
        product: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Create a product.

        Args:
            product: Product definition (title, options, variants, files).
                Keys may be snake_case or the backend's camelCase.
            timeout: Seconds to wait for asynchronous creation.

        Returns:
            Id of the created product.
        """
        try:
            request = CreateProductRequest.model_validate(product)
        except ValidationError as e:
            return _failure(format_validation_error(e))

        logger.info(
            "Creating product",
            title=request.title,
            variants=len(request.variants),
        )

        try:
            product_id = await self.service.create_product(request, timeout=timeout)
        except CatalogError as e:
            return _failure(format_error(e))

        return {
            "success": True,
            "product_id": product_id,
            "message": f"Product '{request.title}' created with id {product_id}.",
        }

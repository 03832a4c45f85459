"""Catalog service.

Single entry point for product search, lookup, creation, store locations
and backend health. Composes the query builder, pager, normalizer and
creation orchestrator over one shared Admin API client.
"""

from datetime import datetime, timezone
from typing import Any

import structlog

from shopcatalog.catalog.creation import CreationOrchestrator
from shopcatalog.catalog.normalizer import normalize_product
from shopcatalog.catalog.pager import Connection, Pager
from shopcatalog.catalog.queries import (
    LOCATIONS_QUERY,
    PRODUCT_DETAIL_QUERY,
    PRODUCT_VARIANTS_QUERY,
    SHOP_QUERY,
)
from shopcatalog.catalog.query_builder import build_query, map_sort
from shopcatalog.domain.exceptions import PaginationStalledError, ProductNotFoundError
from shopcatalog.domain.identifiers import ResourceKind, ensure_resource_id, to_local
from shopcatalog.domain.models import (
    CreateProductRequest,
    HealthStatus,
    Location,
    Page,
    SearchRequest,
    UnifiedProduct,
)
from shopcatalog.domain.validation import ensure_valid_create_request
from shopcatalog.infrastructure.admin_client import ShopifyAdminClient
from shopcatalog.infrastructure.config import Settings, settings as default_settings

logger = structlog.get_logger()


class CatalogService:
    """Service for catalog operations.

    Holds the Admin API client for the lifetime of the process; every
    operation is a short sequential chain of requests over it.

    Example usage:
        async with CatalogService.from_settings() as catalog:
            page = await catalog.search(SearchRequest(query="boots", page=2))
            product = await catalog.get_product(page.items[0].id)
    """

    def __init__(
        self,
        client: ShopifyAdminClient,
        config: Settings | None = None,
        orchestrator: CreationOrchestrator | None = None,
    ) -> None:
        """Initialize service with an Admin API client.

        Args:
            client: Shared Admin API client.
            config: Settings; defaults to the environment settings.
            orchestrator: Creation orchestrator; built from config if omitted.
        """
        self.client = client
        self.config = config or default_settings
        self.pager = Pager(client)
        self.orchestrator = orchestrator or CreationOrchestrator(
            client,
            poll_interval=self.config.creation_poll_interval,
            timeout=self.config.creation_poll_timeout,
            sync_variant_threshold=self.config.sync_variant_threshold,
        )

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "CatalogService":
        """Build the service and its client from settings.

        Raises:
            ConfigurationError: If the shop or access token is missing.
        """
        config = config or default_settings
        return cls(ShopifyAdminClient.from_settings(config), config)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()

    async def __aenter__(self) -> "CatalogService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def search(self, request: SearchRequest) -> Page[UnifiedProduct]:
        """Search products with page-number pagination.

        Args:
            request: Search request.

        Returns:
            Page of unified products. Pages past the end are empty.
        """
        query = build_query(request)
        sort = map_sort(request)

        logger.info(
            "Searching products",
            query=query,
            page=request.page,
            limit=request.limit,
            sort_key=sort.sort_key,
            reverse=sort.reverse,
        )

        raw_page = await self.pager.fetch_page(
            query,
            sort,
            page=request.page,
            limit=request.limit,
            variants_first=self.config.search_variants_first,
        )
        return Page[UnifiedProduct](
            items=[normalize_product(record) for record in raw_page.items],
            meta=raw_page.meta,
        )

    async def get_product(self, identifier: str) -> UnifiedProduct:
        """Get a product with all of its variants.

        Args:
            identifier: Numeric product id or product global id.

        Returns:
            Unified product.

        Raises:
            UnsupportedIdentifierError: For handles and other identifier forms.
            ProductNotFoundError: If no product has this id.
            PaginationStalledError: If the variant cursor stops advancing.
        """
        product_id = ensure_resource_id(identifier, ResourceKind.PRODUCT)
        page_size = self.config.variant_page_size

        data = await self.client.execute(
            PRODUCT_DETAIL_QUERY,
            {"id": product_id, "variantsFirst": page_size},
        )
        record = data.get("product")
        if record is None:
            raise ProductNotFoundError(to_local(product_id))

        first = Connection.from_response(record.get("variants"), "product.variants")
        variants = first.nodes
        if first.has_next_page:
            if first.end_cursor is None:
                raise PaginationStalledError("product.variants", None)
            overflow = await self.pager.collect(
                PRODUCT_VARIANTS_QUERY,
                {"id": product_id, "first": page_size},
                ("product", "variants"),
                after=first.end_cursor,
            )
            logger.info(
                "Fetched overflow variants",
                product_id=product_id,
                first_page=len(variants),
                overflow=len(overflow),
            )
            variants = variants + overflow

        return normalize_product(record, variants)

    async def list_locations(self) -> list[Location]:
        """List every store location."""
        nodes = await self.pager.collect(
            LOCATIONS_QUERY,
            {"first": self.config.locations_page_size},
            ("locations",),
        )
        return [
            Location(
                id=to_local(node["id"], ResourceKind.LOCATION),
                name=node.get("name") or "",
                is_active=bool(node.get("isActive")),
                fulfills_online_orders=bool(node.get("fulfillsOnlineOrders")),
            )
            for node in nodes
        ]

    async def create_product(
        self,
        request: CreateProductRequest,
        timeout: float | None = None,
    ) -> str:
        """Create a product.

        Args:
            request: Product to create.
            timeout: Overrides the configured creation timeout.

        Returns:
            Local id of the new product.

        Raises:
            CreateRequestInvalidError: If the request breaks a validation rule.
            CreationRejectedError: If the backend rejects the product.
            CreationTimedOutError: If creation does not finish in time.
        """
        ensure_valid_create_request(request)
        product_id = await self.orchestrator.create(request, timeout=timeout)
        return to_local(product_id, ResourceKind.PRODUCT)

    async def check_health(self) -> HealthStatus:
        """Check backend health with a minimal read. Never raises."""
        now = datetime.now(timezone.utc)
        try:
            data = await self.client.execute(SHOP_QUERY)
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return HealthStatus(
                status="error",
                last_check=now,
                message=getattr(e, "message", None) or str(e),
            )

        if data.get("shop"):
            logger.debug("Shopify API is healthy", shop=data["shop"].get("name"))
            return HealthStatus(status="healthy", last_check=now)

        logger.warning("Shopify API returned no data")
        return HealthStatus(
            status="warning",
            last_check=now,
            message="No data returned from Shopify API",
        )

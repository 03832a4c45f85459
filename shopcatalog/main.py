"""Shopify catalog MCP server.

Exposes the catalog as MCP tools for AI agents:
1. check-shopify-store-health - Check the Admin API connection
2. shopify-product-search - Search products
3. shopify-product-lookup - Get product details
4. shopify-store-locations - List store locations
5. shopify-product-create - Create a product
"""

import asyncio
import json
import logging
import sys
from decimal import Decimal
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    TextContent,
    Tool,
)
from pydantic import BaseModel, Field
import structlog

from shopcatalog.domain.exceptions import CatalogError
from shopcatalog.infrastructure.config import settings
from shopcatalog.tools import format_error

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(message)s",
    stream=sys.stderr,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

TOOL_NAMES = (
    "check-shopify-store-health",
    "shopify-product-search",
    "shopify-product-lookup",
    "shopify-store-locations",
    "shopify-product-create",
)


# ============================================================================
# Tool Input Schemas
# ============================================================================


class NoInput(BaseModel):
    """Input schema for tools without arguments."""


class ProductSearchInput(BaseModel):
    """Input schema for shopify-product-search tool."""

    query: str | None = Field(
        None,
        description="Free-text search, 2-100 characters. Example: 'wool socks'",
    )
    page: int = Field(
        default=1,
        ge=1,
        description="Page number for pagination.",
    )
    limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of products per page.",
    )
    category: str | None = Field(None, description="Product type to filter by.")
    vendor: str | None = Field(None, description="Vendor to filter by.")
    price_min: Decimal | None = Field(None, ge=0, description="Lowest variant price.")
    price_max: Decimal | None = Field(None, ge=0, description="Highest variant price.")
    available_only: bool = Field(
        default=True,
        description="Only return products that have stock.",
    )
    sort: list[str] | None = Field(
        None,
        description="Sort entries as 'field,direction' with field 'updated' or "
        "'name'. Only the first entry is applied.",
    )


class ProductLookupInput(BaseModel):
    """Input schema for shopify-product-lookup tool."""

    product_id: str = Field(
        ...,
        description="Numeric product id or gid://shopify/Product/<id>. "
        "Handles are not supported.",
    )


class ProductCreateInput(BaseModel):
    """Input schema for shopify-product-create tool."""

    product: dict[str, Any] = Field(
        ...,
        description="Product definition: title (required), description_html, "
        "category, vendor, options [{name, values: [{name}]}], variants "
        "[{option_values: [{option_name, name}], price, compare_at_price, sku, "
        "inventory_item, inventory_quantities: [{location_id, name, quantity}], "
        "file}], files [{id | original_source, alt, content_type}].",
    )
    timeout: float | None = Field(
        None,
        gt=0,
        description="Seconds to wait for asynchronous creation to finish.",
    )


# ============================================================================
# MCP Server Implementation
# ============================================================================


def create_mcp_server() -> Server:
    """Create and configure the MCP server with all tools."""
    server = Server("shopcatalog-mcp")

    _tools_instance = None

    async def get_tools():
        """Get or create the CatalogTools instance."""
        nonlocal _tools_instance
        if _tools_instance is None:
            from shopcatalog.catalog.service import CatalogService
            from shopcatalog.tools import CatalogTools

            _tools_instance = CatalogTools(service=CatalogService.from_settings(settings))
        return _tools_instance

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List all available MCP tools."""
        return [
            Tool(
                name="check-shopify-store-health",
                description=(
                    "Check the connection to the Shopify store. "
                    "Returns healthy, warning or error with a message."
                ),
                inputSchema=NoInput.model_json_schema(),
            ),
            Tool(
                name="shopify-product-search",
                description=(
                    "Search the Shopify catalog by text, product type, vendor, "
                    "price range and availability. Returns one page of products "
                    "with pagination metadata."
                ),
                inputSchema=ProductSearchInput.model_json_schema(),
            ),
            Tool(
                name="shopify-product-lookup",
                description=(
                    "Get one product by id with every variant, its primary image "
                    "and price range."
                ),
                inputSchema=ProductLookupInput.model_json_schema(),
            ),
            Tool(
                name="shopify-store-locations",
                description=(
                    "List store locations. Use the ids for initial inventory "
                    "when creating products."
                ),
                inputSchema=NoInput.model_json_schema(),
            ),
            Tool(
                name="shopify-product-create",
                description=(
                    "Create a product with options, variants, inventory and media. "
                    "Waits until Shopify finishes and returns the new product id."
                ),
                inputSchema=ProductCreateInput.model_json_schema(),
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool invocation."""
        logger.info("Tool called", tool=name, arguments=arguments)

        try:
            tools = await get_tools()

            if name == "check-shopify-store-health":
                result = await tools.check_store_health()
            elif name == "shopify-product-search":
                input_data = ProductSearchInput(**(arguments or {}))
                result = await tools.search_products(**input_data.model_dump())
            elif name == "shopify-product-lookup":
                input_data = ProductLookupInput(**(arguments or {}))
                result = await tools.lookup_product(product_id=input_data.product_id)
            elif name == "shopify-store-locations":
                result = await tools.list_locations()
            elif name == "shopify-product-create":
                input_data = ProductCreateInput(**(arguments or {}))
                result = await tools.create_product(
                    product=input_data.product,
                    timeout=input_data.timeout,
                )
            else:
                result = {
                    "success": False,
                    "error": f"Unknown tool: {name}. Available tools: {', '.join(TOOL_NAMES)}",
                }

            logger.info("Tool completed", tool=name, success=result.get("success"))

            return [
                TextContent(
                    type="text",
                    text=json.dumps(result, indent=2, default=str),
                )
            ]

        except CatalogError as e:
            logger.warning("Tool failed", tool=name, error_code=e.error_code)
            return [
                TextContent(
                    type="text",
                    text=json.dumps({"success": False, "error": format_error(e)}, indent=2),
                )
            ]
        except Exception as e:
            logger.exception("Tool execution failed", tool=name)
            return [
                TextContent(
                    type="text",
                    text=json.dumps(
                        {
                            "success": False,
                            "error": f"Tool execution failed: {str(e)}",
                        },
                        indent=2,
                    ),
                )
            ]

    return server


async def run_server() -> None:
    """Run the MCP server using stdio transport."""
    logger.info(
        "Starting Shopify catalog MCP server",
        shop=settings.shopify_shop,
        api_version=settings.shopify_api_version,
    )

    server = create_mcp_server()

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Run the MCP server.

    Entry point for the MCP server. Uses stdio transport for
    communication with AI agents.
    """
    asyncio.run(run_server())


if __name__ == "__main__":
    main()

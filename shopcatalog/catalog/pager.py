"""Cursor pager.

The Admin API only lists "first N after cursor C". The pager emulates
page-number pagination on top of that and walks overflow connections
(a product's remaining variants, store locations) to exhaustion.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from shopcatalog.catalog.queries import (
    PRODUCT_CURSORS_QUERY,
    PRODUCTS_COUNT_QUERY,
    PRODUCTS_PAGE_QUERY,
)
from shopcatalog.catalog.query_builder import SortSpec
from shopcatalog.domain.exceptions import PaginationStalledError, ProtocolViolationError
from shopcatalog.domain.models import Page, PageMeta
from shopcatalog.infrastructure.admin_client import ShopifyAdminClient

logger = structlog.get_logger()


def dig(data: Any, path: tuple[str, ...]) -> Any:
    """Follow a key path through nested dicts, None if any step is missing."""
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


@dataclass(frozen=True)
class Connection:
    """One page of a GraphQL connection."""

    nodes: list[dict[str, Any]]
    has_next_page: bool
    end_cursor: str | None

    @classmethod
    def from_response(cls, raw: Any, name: str) -> "Connection":
        """Parse a connection object (``nodes`` + ``pageInfo``).

        Raises:
            ProtocolViolationError: If the connection is missing.
        """
        if not isinstance(raw, dict):
            raise ProtocolViolationError(
                f"Response has no {name} connection",
                details={"connection": name},
            )
        page_info = raw.get("pageInfo") or {}
        return cls(
            nodes=list(raw.get("nodes") or []),
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )


class Pager:
    """Page-number and overflow pagination over cursor connections."""

    def __init__(self, client: ShopifyAdminClient) -> None:
        self.client = client

    async def count_products(self, query: str) -> int:
        """Count products matching a search query."""
        data = await self.client.execute(PRODUCTS_COUNT_QUERY, {"query": query or None})
        count = dig(data, ("productsCount", "count"))
        if not isinstance(count, int):
            raise ProtocolViolationError("productsCount returned no count")
        return count

    async def fetch_page(
        self,
        query: str,
        sort: SortSpec,
        page: int,
        limit: int,
        variants_first: int,
    ) -> Page[dict[str, Any]]:
        """Fetch one page of raw product records.

        Skipped pages are requested cursor-only; their items are never
        transferred. A page past the end of the data is an empty result.

        Args:
            query: Backend search query.
            sort: Backend sort arguments.
            page: Page number (1-based).
            limit: Items per page.
            variants_first: Variants fetched with each product.

        Returns:
            Page of raw product nodes.

        Raises:
            PaginationStalledError: If a skip step does not advance the cursor.
        """
        total = await self.count_products(query)
        base_variables = {
            "first": limit,
            "query": query or None,
            "sortKey": sort.sort_key,
            "reverse": sort.reverse,
        }

        cursor: str | None = None
        for step in range(1, page):
            data = await self.client.execute(
                PRODUCT_CURSORS_QUERY,
                {**base_variables, "after": cursor},
            )
            connection = Connection.from_response(dig(data, ("products",)), "products")
            if not connection.has_next_page:
                logger.info(
                    "Requested page is past the end of the results",
                    page=page,
                    last_page=step,
                )
                return Page(
                    items=[],
                    meta=PageMeta(
                        total=total,
                        page=page,
                        limit=limit,
                        has_next=False,
                        has_prev=page > 1,
                    ),
                )
            if connection.end_cursor is None or connection.end_cursor == cursor:
                raise PaginationStalledError("products", cursor)
            cursor = connection.end_cursor

        data = await self.client.execute(
            PRODUCTS_PAGE_QUERY,
            {**base_variables, "after": cursor, "variantsFirst": variants_first},
        )
        connection = Connection.from_response(dig(data, ("products",)), "products")

        logger.debug(
            "Fetched product page",
            page=page,
            limit=limit,
            items=len(connection.nodes),
            has_next=connection.has_next_page,
        )

        return Page(
            items=connection.nodes[:limit],
            meta=PageMeta(
                total=total,
                page=page,
                limit=limit,
                has_next=connection.has_next_page,
                has_prev=page > 1,
            ),
        )

    async def collect(
        self,
        document: str,
        variables: dict[str, Any],
        path: tuple[str, ...],
        after: str | None = None,
    ) -> list[dict[str, Any]]:
        """Accumulate every node of a connection, starting after a cursor.

        Args:
            document: GraphQL document with an ``$after`` variable.
            variables: Other operation variables.
            path: Key path from ``data`` to the connection.
            after: Cursor to start from.

        Returns:
            Nodes in backend order.

        Raises:
            PaginationStalledError: If the backend returns the cursor it
                was asked to continue from.
        """
        name = ".".join(path)
        nodes: list[dict[str, Any]] = []
        cursor = after

        while True:
            data = await self.client.execute(document, {**variables, "after": cursor})
            connection = Connection.from_response(dig(data, path), name)
            nodes.extend(connection.nodes)

            if not connection.has_next_page:
                return nodes
            if connection.end_cursor is None or connection.end_cursor == cursor:
                raise PaginationStalledError(name, cursor)

            logger.debug("Following cursor", connection=name, collected=len(nodes))
            cursor = connection.end_cursor

"""Search query builder.

Translates a structured ``SearchRequest`` into the backend's text search
syntax (``vendor:'Acme' variants.price:>=10``) and its sort arguments.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog

from shopcatalog.domain.exceptions import InvalidSortFieldError
from shopcatalog.domain.models import SORTABLE_FIELDS, SearchRequest, SortDirection

logger = structlog.get_logger()

AVAILABLE_ONLY_TOKEN = "inventory_total:>0"

# Sort field -> backend ProductSortKeys
SORT_KEYS: dict[str, str] = {
    "updated": "UPDATED_AT",
    "name": "TITLE",
}
RELEVANCE_SORT_KEY = "RELEVANCE"
DEFAULT_SORT_KEY = "ID"


@dataclass(frozen=True)
class SortSpec:
    """Backend sort arguments."""

    sort_key: str
    reverse: bool = False


def escape_text(text: str) -> str:
    """Escape double quotes in free text."""
    return text.replace('"', '\\"')


def quote_value(value: str) -> str:
    """Wrap a filter value in single quotes, escaping embedded ones."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def format_amount(value: Decimal) -> str:
    """Render a price without exponent or trailing zeros."""
    return f"{Decimal(value).normalize():f}"


def build_query(request: SearchRequest) -> str:
    """Build the backend search query string.

    Tokens are emitted in a fixed order (free text, category, vendor,
    minimum price, maximum price, availability), so equal requests always
    produce equal strings.

    Args:
        request: Search request.

    Returns:
        Space-joined query tokens; empty when nothing is filtered.
    """
    tokens: list[str] = []
    filters = request.filters

    if request.query:
        tokens.append(escape_text(request.query.strip()))
    if filters.category:
        tokens.append(f"product_type:{quote_value(filters.category)}")
    if filters.vendor:
        tokens.append(f"vendor:{quote_value(filters.vendor)}")
    if filters.price_min is not None:
        tokens.append(f"variants.price:>={format_amount(filters.price_min)}")
    if filters.price_max is not None:
        tokens.append(f"variants.price:<={format_amount(filters.price_max)}")
    if filters.available_only:
        tokens.append(AVAILABLE_ONLY_TOKEN)

    return " ".join(token for token in tokens if token)


def map_sort(request: SearchRequest) -> SortSpec:
    """Map the request's sort entries to backend sort arguments.

    Only the first entry is applied. The backend sorts by a single key, so
    further entries are accepted but ignored (and logged).

    Raises:
        InvalidSortFieldError: If the first entry names an unknown field.
    """
    if not request.sort:
        if request.query:
            return SortSpec(sort_key=RELEVANCE_SORT_KEY)
        return SortSpec(sort_key=DEFAULT_SORT_KEY)

    first, *ignored = request.sort
    sort_key = SORT_KEYS.get(first.field)
    if sort_key is None:
        raise InvalidSortFieldError(first.field, list(SORTABLE_FIELDS))

    if ignored:
        logger.info(
            "Ignoring secondary sort entries",
            applied=first.field,
            ignored=[item.field for item in ignored],
        )

    return SortSpec(
        sort_key=sort_key,
        reverse=first.direction == SortDirection.DESC,
    )

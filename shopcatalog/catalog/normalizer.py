"""Product record normalizer.

Maps an Admin API product node onto ``UnifiedProduct``. Backend records
carry media in several optional places and prices as a decimal-string
range; the output always has the same shape.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from shopcatalog.domain.exceptions import ProtocolViolationError
from shopcatalog.domain.identifiers import ResourceKind, to_local
from shopcatalog.domain.models import (
    ImageObject,
    PriceRange,
    SourceMetadata,
    SyncStatus,
    UnifiedProduct,
    UnifiedVariant,
    VariantOption,
)

IMAGE_CONTENT_TYPE = "IMAGE"
SKU_OPTION_NAME = "SKU"


def _media_image(media: dict[str, Any] | None) -> ImageObject | None:
    """Image of a media entry: its own image url, else its preview url."""
    if not media:
        return None
    for source in (media.get("image"), (media.get("preview") or {}).get("image")):
        if source and source.get("url"):
            return ImageObject(
                url=source["url"],
                alt=source.get("altText") or media.get("alt") or None,
            )
    return None


def _preview_image(media: dict[str, Any] | None) -> ImageObject | None:
    preview = ((media or {}).get("preview") or {}).get("image")
    if preview and preview.get("url"):
        return ImageObject(url=preview["url"], alt=preview.get("altText") or None)
    return None


def select_primary_image(record: dict[str, Any]) -> ImageObject | None:
    """Pick the single image shown for a product.

    Order: featured media when it is an image; the first image in the
    media list; the preview of the first media entry of any kind (video
    and 3D placeholders); nothing.
    """
    featured = record.get("featuredMedia")
    if featured and featured.get("mediaContentType") == IMAGE_CONTENT_TYPE:
        image = _media_image(featured)
        if image is not None:
            return image

    media = (record.get("media") or {}).get("nodes") or []
    for entry in media:
        if entry and entry.get("mediaContentType") == IMAGE_CONTENT_TYPE:
            image = _media_image(entry)
            if image is not None:
                return image

    if media:
        return _preview_image(media[0])
    return None


def parse_amount(value: Any) -> float:
    """Parse a decimal-string amount.

    Raises:
        ProtocolViolationError: If the amount is not a number.
    """
    try:
        return float(Decimal(str(value)))
    except (InvalidOperation, ValueError) as e:
        raise ProtocolViolationError(
            f"Invalid amount {value!r} in product record",
            details={"amount": value},
        ) from e


def parse_price_range(record: dict[str, Any]) -> PriceRange:
    """Build the price range from ``priceRangeV2``.

    The minimum entry's currency is used. A maximum in another currency
    is a backend contract violation and is reported, not guessed around.
    """
    price_range = record.get("priceRangeV2") or {}
    low = price_range.get("minVariantPrice")
    high = price_range.get("maxVariantPrice")
    if not low or not high:
        raise ProtocolViolationError(
            f"Product {record.get('id')} has no price range",
            details={"product_id": record.get("id")},
        )

    currency = low.get("currencyCode")
    if high.get("currencyCode") != currency:
        raise ProtocolViolationError(
            f"Product {record.get('id')} price range mixes currencies "
            f"{currency} and {high.get('currencyCode')}",
            details={
                "product_id": record.get("id"),
                "min_currency": currency,
                "max_currency": high.get("currencyCode"),
            },
        )

    return PriceRange(
        min=parse_amount(low.get("amount")),
        max=parse_amount(high.get("amount")),
        currency=currency,
    )


def normalize_variant(node: dict[str, Any]) -> UnifiedVariant:
    """Map a variant node; a SKU becomes a trailing ``SKU`` option."""
    options = [
        VariantOption(name=o["name"], value=o["value"])
        for o in node.get("selectedOptions") or []
    ]
    if node.get("sku"):
        options.append(VariantOption(name=SKU_OPTION_NAME, value=node["sku"]))

    quantity = node.get("inventoryQuantity")
    if quantity is not None:
        # Oversold variants report negative stock
        quantity = max(int(quantity), 0)

    return UnifiedVariant(
        id=to_local(node["id"], ResourceKind.PRODUCT_VARIANT),
        title=node.get("title") or "",
        price=parse_amount(node.get("price")),
        available=bool(node.get("availableForSale")),
        inventory_quantity=quantity,
        options=options,
    )


def normalize_product(
    record: dict[str, Any],
    variants: list[dict[str, Any]] | None = None,
) -> UnifiedProduct:
    """Normalize an Admin API product record.

    Args:
        record: Product node.
        variants: Complete variant nodes when the record's own variant
            connection was only the first page.

    Returns:
        Unified product.

    Raises:
        ProtocolViolationError: If the record cannot satisfy the unified
            product invariants (no variants, non-positive prices, ...).
    """
    if variants is None:
        variants = (record.get("variants") or {}).get("nodes") or []

    image = select_primary_image(record)
    try:
        return UnifiedProduct(
            id=to_local(record["id"], ResourceKind.PRODUCT),
            title=record.get("title") or "",
            description=record.get("description") or None,
            price_range=parse_price_range(record),
            images=[image] if image is not None else [],
            variants=[normalize_variant(v) for v in variants],
            handle=record.get("handle") or None,
            product_type=record.get("productType") or None,
            vendor=record.get("vendor") or None,
            tags=list(dict.fromkeys(record.get("tags") or [])),
            source_metadata=SourceMetadata(
                source_id=record["id"],
                sync_status=SyncStatus.SYNCED,
                last_updated=record.get("updatedAt"),
            ),
        )
    except (KeyError, ValidationError) as e:
        raise ProtocolViolationError(
            f"Product record {record.get('id')} is malformed: {e}",
            details={"product_id": record.get("id")},
        ) from e

"""Catalog models.

Pydantic models for search requests, normalized product records, pages,
locations, health reports and product creation requests. Result models are
frozen: they are built once per call and never mutated afterwards.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

SortField = Literal["updated", "name"]
SORTABLE_FIELDS: tuple[str, ...] = ("updated", "name")


# ============================================================================
# Search
# ============================================================================


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SortItem(BaseModel):
    """One sort entry. Only allow-listed fields are accepted."""

    model_config = ConfigDict(frozen=True)

    field: SortField
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def split(cls, raw: str) -> dict[str, str]:
        """Split a ``"field,dir"`` string into model input.

        The direction defaults to ascending; anything other than ``desc``
        is treated as ascending.
        """
        parts = [p.strip() for p in raw.split(",") if p.strip()]
        field = parts[0] if parts else ""
        desc = len(parts) > 1 and parts[1].lower() == "desc"
        return {
            "field": field,
            "direction": SortDirection.DESC.value if desc else SortDirection.ASC.value,
        }


class SearchFilters(BaseModel):
    """Structured product filters."""

    model_config = ConfigDict(frozen=True)

    category: str | None = Field(default=None, max_length=100)
    vendor: str | None = Field(default=None, max_length=100)
    price_min: Decimal | None = Field(default=None, ge=0)
    price_max: Decimal | None = Field(default=None, ge=0)
    available_only: bool = True

    @model_validator(mode="after")
    def check_price_bounds(self) -> "SearchFilters":
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise ValueError("price_min must not be greater than price_max")
        return self


class SearchRequest(BaseModel):
    """Product search request with page-number pagination."""

    model_config = ConfigDict(frozen=True)

    query: str | None = Field(default=None, min_length=2, max_length=100)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort: tuple[SortItem, ...] = ()

    @field_validator("sort", mode="before")
    @classmethod
    def parse_sort(cls, value: Any) -> Any:
        # Accepts "name,desc", ["name,desc", "updated"] or sort item dicts
        if value is None:
            return ()
        if isinstance(value, (str, dict, SortItem)):
            value = [value]
        return [SortItem.split(v) if isinstance(v, str) else v for v in value]


class PageMeta(BaseModel):
    """Pagination metadata for a page of results."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    has_next: bool
    has_prev: bool


class Page(BaseModel, Generic[T]):
    """A page of items."""

    model_config = ConfigDict(frozen=True)

    items: list[T]
    meta: PageMeta

    @model_validator(mode="after")
    def check_size(self) -> "Page[T]":
        if len(self.items) > self.meta.limit:
            raise ValueError(
                f"Page holds {len(self.items)} items but limit is {self.meta.limit}"
            )
        return self


# ============================================================================
# Unified Product
# ============================================================================


class ImageObject(BaseModel):
    """Product image."""

    model_config = ConfigDict(frozen=True)

    url: str
    alt: str | None = None


class PriceRange(BaseModel):
    """Price range across a product's variants."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    currency: str = Field(min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def check_order(self) -> "PriceRange":
        if self.min > self.max:
            raise ValueError(f"Minimum price {self.min} exceeds maximum {self.max}")
        return self


class VariantOption(BaseModel):
    """Name/value option of a variant."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class UnifiedVariant(BaseModel):
    """Normalized product variant."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    price: float = Field(gt=0)
    available: bool
    inventory_quantity: int | None = Field(default=None, ge=0)
    options: list[VariantOption] = Field(default_factory=list)


class SyncStatus(str, Enum):
    """Synchronization state of a record."""

    SYNCED = "synced"
    PENDING = "pending"
    ERROR = "error"


class SourceMetadata(BaseModel):
    """Technical metadata about where a record came from."""

    model_config = ConfigDict(frozen=True)

    source_id: str | None = None
    sync_status: SyncStatus | None = None
    last_updated: datetime | None = None


class UnifiedProduct(BaseModel):
    """Source-agnostic product representation."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = Field(min_length=1)
    description: str | None = None
    source: Literal["internal", "shopify"] = "shopify"
    price_range: PriceRange
    # Primary image only
    images: list[ImageObject] = Field(default_factory=list, max_length=1)
    variants: list[UnifiedVariant] = Field(min_length=1)
    handle: str | None = None
    product_type: str | None = None
    vendor: str | None = None
    tags: list[str] = Field(default_factory=list)
    source_metadata: SourceMetadata | None = None


# ============================================================================
# Store Information
# ============================================================================


class Location(BaseModel):
    """Store location."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    is_active: bool = False
    fulfills_online_orders: bool = False


class HealthStatus(BaseModel):
    """Backend health report."""

    model_config = ConfigDict(frozen=True)

    status: Literal["healthy", "warning", "error"]
    last_check: datetime
    message: str | None = None


# ============================================================================
# Product Creation
# ============================================================================


class _CreateModel(BaseModel):
    """Base for creation input; serializes with the backend's camelCase names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class OptionValue(_CreateModel):
    """A declared value of a product option."""

    name: str = Field(min_length=1)


class ProductOption(_CreateModel):
    """Named option group, e.g. Size with S/M/L."""

    name: str = Field(min_length=1)
    values: list[OptionValue] = Field(min_length=1)


class OptionValueRef(_CreateModel):
    """Reference from a variant to a declared option value."""

    option_name: str
    name: str


class InventoryQuantity(_CreateModel):
    """Initial stock for a variant at a location."""

    location_id: str | int
    name: Literal["available", "on_hand"]
    quantity: int = Field(ge=0)


class VariantInventory(_CreateModel):
    """Inventory item settings for a variant."""

    tracked: bool = True
    cost: float | None = None
    requires_shipping: bool = True


class FileContentType(str, Enum):
    """Kinds of files that can be attached to a product."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    EXTERNAL_VIDEO = "EXTERNAL_VIDEO"
    MODEL_3D = "MODEL_3D"
    FILE = "FILE"


class FileSet(_CreateModel):
    """Media reference: an existing file id or an external source URL."""

    id: str | int | None = None
    original_source: str | None = None
    alt: str | None = None
    content_type: FileContentType = FileContentType.IMAGE

    @model_validator(mode="after")
    def check_reference(self) -> "FileSet":
        if not self.id and not self.original_source:
            raise ValueError('Each file needs an "id" or an "original_source"')
        return self


class ProductVariantInput(_CreateModel):
    """Variant to create."""

    option_values: list[OptionValueRef] = Field(default_factory=list)
    price: float = Field(ge=0)
    compare_at_price: float | None = Field(default=None, ge=0)
    inventory_item: VariantInventory | None = None
    inventory_quantities: list[InventoryQuantity] | None = None
    sku: str | None = Field(default=None, max_length=255)
    file: FileSet | None = None

    @field_validator("sku")
    @classmethod
    def strip_sku(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @model_validator(mode="after")
    def check_compare_at_price(self) -> "ProductVariantInput":
        if self.compare_at_price is not None and self.compare_at_price <= self.price:
            raise ValueError("compare_at_price must be greater than price")
        return self


class CreateProductRequest(_CreateModel):
    """Product to create."""

    title: str = Field(min_length=1)
    description_html: str | None = None
    category: str | None = Field(default=None, alias="productType")
    vendor: str | None = None
    options: list[ProductOption] = Field(
        default_factory=list, max_length=3, alias="productOptions"
    )
    variants: list[ProductVariantInput] = Field(default_factory=list, max_length=100)
    files: list[FileSet] = Field(default_factory=list)

"""Domain layer - models, identifiers, validation rules, state machines.

- **Models**: Search requests, unified products, pages and create requests
- **Identifiers**: Global id codec (``gid://shopify/Product/42`` <-> ``42``)
- **Validation**: Cross-field rules for product creation
- **State Machines**: Product creation lifecycle
- **Exceptions**: Typed catalog errors

Example usage:
    from shopcatalog.domain import SearchRequest, ResourceKind, to_global

    request = SearchRequest(query="boots", sort="name,desc")
    to_global("42", ResourceKind.PRODUCT)  # gid://shopify/Product/42
"""

# Exceptions
from shopcatalog.domain.exceptions import (
    CatalogError,
    ConfigurationError,
    CreateRequestInvalidError,
    CreationRejectedError,
    CreationTimedOutError,
    InvalidIdentifierError,
    InvalidSortFieldError,
    InvalidStateTransitionError,
    PaginationStalledError,
    ProductNotFoundError,
    ProtocolViolationError,
    TransportError,
    UnsupportedIdentifierError,
)

# Identifiers
from shopcatalog.domain.identifiers import (
    ResourceKind,
    ensure_resource_id,
    is_global_id,
    to_global,
    to_local,
)

# Models
from shopcatalog.domain.models import (
    CreateProductRequest,
    FileSet,
    HealthStatus,
    ImageObject,
    InventoryQuantity,
    Location,
    OptionValue,
    OptionValueRef,
    Page,
    PageMeta,
    PriceRange,
    ProductOption,
    ProductVariantInput,
    SearchFilters,
    SearchRequest,
    SortItem,
    UnifiedProduct,
    UnifiedVariant,
    VariantInventory,
)

# State machines
from shopcatalog.domain.state_machines import CreationState, OperationStatus

# Validation
from shopcatalog.domain.validation import (
    Violation,
    ensure_valid_create_request,
    validate_create_request,
)

__all__ = [
    # Exceptions
    "CatalogError",
    "ConfigurationError",
    "CreateRequestInvalidError",
    "CreationRejectedError",
    "CreationTimedOutError",
    "InvalidIdentifierError",
    "InvalidSortFieldError",
    "InvalidStateTransitionError",
    "PaginationStalledError",
    "ProductNotFoundError",
    "ProtocolViolationError",
    "TransportError",
    "UnsupportedIdentifierError",
    # Identifiers
    "ResourceKind",
    "ensure_resource_id",
    "is_global_id",
    "to_global",
    "to_local",
    # Models
    "CreateProductRequest",
    "FileSet",
    "HealthStatus",
    "ImageObject",
    "InventoryQuantity",
    "Location",
    "OptionValue",
    "OptionValueRef",
    "Page",
    "PageMeta",
    "PriceRange",
    "ProductOption",
    "ProductVariantInput",
    "SearchFilters",
    "SearchRequest",
    "SortItem",
    "UnifiedProduct",
    "UnifiedVariant",
    "VariantInventory",
    # State machines
    "CreationState",
    "OperationStatus",
    # Validation
    "Violation",
    "ensure_valid_create_request",
    "validate_create_request",
]

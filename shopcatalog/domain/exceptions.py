"""Catalog exceptions.

All errors raised by the catalog core. Every failure a caller can observe
is one of these types, so the presentation layer can catch ``CatalogError``
and report the kind and message without inspecting backend payloads.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    Attributes:
        error_code: Machine-readable error kind.
        message: Human-readable error message.
        details: Additional error context.
    """

    error_code: str = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CatalogError):
    """Raised when required backend credentials are missing."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            f"Missing required settings: {', '.join(missing)}",
            details={"missing": missing},
        )


# ============================================================================
# Identifier Errors
# ============================================================================


class InvalidIdentifierError(CatalogError):
    """Raised when a value cannot be turned into a global id of a kind."""

    error_code = "INVALID_IDENTIFIER"

    def __init__(self, value: Any, kind: str) -> None:
        """Initialize invalid identifier error.

        Args:
            value: The offending value.
            kind: Expected resource kind (e.g., "Product").
        """
        super().__init__(
            f"Invalid {kind} id {value!r}: use a number or gid://shopify/{kind}/<number>",
            details={"value": str(value), "kind": kind},
        )


class UnsupportedIdentifierError(CatalogError):
    """Raised for identifier forms the catalog does not look up (handles, slugs)."""

    error_code = "UNSUPPORTED_IDENTIFIER"

    def __init__(self, value: str, kind: str) -> None:
        super().__init__(
            f"Unsupported {kind} identifier {value!r}: only numeric ids "
            f"and gid://shopify/{kind}/<number> are accepted",
            details={"value": value, "kind": kind},
        )


# ============================================================================
# Search Errors
# ============================================================================


class InvalidSortFieldError(CatalogError):
    """Raised when a sort field is not in the allow-list."""

    error_code = "INVALID_SORT_FIELD"

    def __init__(self, field: str, allowed: list[str]) -> None:
        super().__init__(
            f"Sort field {field!r} is not allowed. Allowed fields: {allowed}",
            details={"field": field, "allowed": allowed},
        )


class PaginationStalledError(CatalogError):
    """Raised when the backend returns the same cursor twice in a row."""

    error_code = "PAGINATION_STALLED"

    def __init__(self, connection: str, cursor: str | None) -> None:
        super().__init__(
            f"Pagination of {connection} stalled at cursor {cursor!r}",
            details={"connection": connection, "cursor": cursor},
        )


class ProductNotFoundError(CatalogError):
    """Raised when a product lookup returns no record."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )


# ============================================================================
# Backend Errors
# ============================================================================


class ProtocolViolationError(CatalogError):
    """Raised when the backend response breaks its documented contract."""

    error_code = "PROTOCOL_VIOLATION"


class TransportError(CatalogError):
    """Raised for network, HTTP, auth or GraphQL-level request failures.

    Transport failures are never retried inside the catalog core.
    """

    error_code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


# ============================================================================
# Creation Errors
# ============================================================================


def format_user_errors(user_errors: list[dict[str, Any]]) -> str:
    """Aggregate backend user errors into one readable message.

    Args:
        user_errors: Items shaped like ``{"field": [...], "message": "..."}``.

    Returns:
        Messages joined by ``"; "``, each prefixed by its dotted field path.
    """
    parts = []
    for error in user_errors:
        path = ".".join(str(p) for p in error.get("field") or [])
        message = error.get("message") or "Unknown error"
        parts.append(f"{path}: {message}" if path else message)
    return "; ".join(parts)


class CreateRequestInvalidError(CatalogError):
    """Raised when a create request fails one or more validation rules."""

    error_code = "INVALID_CREATE_REQUEST"

    def __init__(self, violations: list[Any]) -> None:
        """Initialize create request error.

        Args:
            violations: Violations reported by the validation rules.
        """
        message = "; ".join(str(v) for v in violations)
        super().__init__(
            f"Invalid product: {message}",
            details={
                "violations": [
                    {"rule": v.rule, "path": v.path, "message": v.message}
                    for v in violations
                ],
            },
        )
        self.violations = violations


class CreationRejectedError(CatalogError):
    """Raised when the backend rejects a creation with user errors.

    Rejections are final; the request is not resubmitted or polled further.
    """

    error_code = "CREATION_REJECTED"

    def __init__(self, user_errors: list[dict[str, Any]]) -> None:
        super().__init__(
            f"Product creation rejected: {format_user_errors(user_errors)}",
            details={"user_errors": user_errors},
        )
        self.user_errors = user_errors


class CreationTimedOutError(CatalogError):
    """Raised when an asynchronous creation does not finish in time.

    The operation may still complete on the backend after this is raised.
    """

    error_code = "CREATION_TIMED_OUT"

    def __init__(self, operation_id: str, last_status: str, timeout: float) -> None:
        super().__init__(
            f"Product creation {operation_id} still {last_status} after {timeout:g}s",
            details={
                "operation_id": operation_id,
                "last_status": last_status,
                "timeout": timeout,
            },
        )
        self.operation_id = operation_id
        self.last_status = last_status


class InvalidStateTransitionError(CatalogError):
    """Raised when a creation attempts an illegal state transition."""

    error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        allowed = allowed_transitions or []
        super().__init__(
            f"Cannot transition creation from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}",
            details={
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )

"""Product creation orchestrator.

Submits a ``productSet`` mutation and drives it to a terminal outcome.
The backend either creates the product right away or hands back an
operation that has to be polled; both end in one product id or a typed
failure.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from shopcatalog.catalog.queries import PRODUCT_OPERATION_QUERY, PRODUCT_SET_MUTATION
from shopcatalog.domain.exceptions import (
    CatalogError,
    CreationRejectedError,
    CreationTimedOutError,
    ProtocolViolationError,
)
from shopcatalog.domain.identifiers import ResourceKind, to_global
from shopcatalog.domain.models import CreateProductRequest
from shopcatalog.domain.state_machines import (
    CreationState,
    OperationStatus,
    validate_creation_transition,
)
from shopcatalog.infrastructure.admin_client import ShopifyAdminClient

logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL = 1.5
DEFAULT_TIMEOUT = 120.0
DEFAULT_SYNC_VARIANT_THRESHOLD = 10


# ============================================================================
# Creation Outcomes
# ============================================================================


@dataclass(frozen=True)
class Immediate:
    """The product was created during the mutation."""

    product_id: str


@dataclass(frozen=True)
class Operation:
    """The product is being created by a backend operation."""

    handle: str
    status: str
    product_id: str | None = None
    user_errors: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "Operation":
        """Create from a ``ProductSetOperation`` object."""
        if not data.get("id"):
            raise ProtocolViolationError("Product operation has no id")
        return cls(
            handle=data["id"],
            status=data.get("status") or "UNKNOWN",
            product_id=(data.get("product") or {}).get("id"),
            user_errors=list(data.get("userErrors") or []),
        )

    @property
    def is_complete(self) -> bool:
        return OperationStatus.is_complete(self.status)


CreationOutcome = Immediate | Operation


def parse_product_set(data: dict[str, Any]) -> CreationOutcome:
    """Classify a ``productSet`` payload.

    Exactly one of ``product`` and ``productSetOperation`` is expected. Both
    are tolerated only when the operation has already completed with the
    same product.

    Raises:
        CreationRejectedError: If the mutation reports user errors.
        ProtocolViolationError: If the result shape breaks the contract.
    """
    result = data.get("productSet")
    if not isinstance(result, dict):
        raise ProtocolViolationError("productSet returned no payload")

    user_errors = list(result.get("userErrors") or [])
    if user_errors:
        raise CreationRejectedError(user_errors)

    product_id = (result.get("product") or {}).get("id")
    raw_operation = result.get("productSetOperation")
    operation = Operation.from_response(raw_operation) if raw_operation else None

    if operation is None:
        if product_id:
            return Immediate(product_id=product_id)
        raise ProtocolViolationError(
            "productSet returned neither a product nor an operation"
        )

    if operation.user_errors:
        raise CreationRejectedError(operation.user_errors)
    if not product_id:
        return operation
    if operation.is_complete and operation.product_id in (None, product_id):
        return Immediate(product_id=product_id)

    raise ProtocolViolationError(
        "productSet returned both a product and an unfinished operation",
        details={
            "product_id": product_id,
            "operation_id": operation.handle,
            "operation_status": operation.status,
        },
    )


def build_product_set_input(request: CreateProductRequest) -> dict[str, Any]:
    """Serialize a create request as ``ProductSetInput``.

    Location and file ids are converted to global ids.
    """
    payload = request.model_dump(by_alias=True, exclude_none=True, mode="json")

    for files_payload, file in zip(payload.get("files", []), request.files):
        if file.id:
            files_payload["id"] = to_global(file.id, ResourceKind.for_file(file.content_type.value))

    for variant_payload, variant in zip(payload.get("variants", []), request.variants):
        quantities = zip(
            variant_payload.get("inventoryQuantities", []),
            variant.inventory_quantities or [],
        )
        for quantity_payload, quantity in quantities:
            quantity_payload["locationId"] = to_global(quantity.location_id, ResourceKind.LOCATION)
        if variant.file is not None and variant.file.id:
            variant_payload["file"]["id"] = to_global(
                variant.file.id,
                ResourceKind.for_file(variant.file.content_type.value),
            )

    return payload


# ============================================================================
# Orchestrator
# ============================================================================


class CreationOrchestrator:
    """Runs one product creation to completion.

    Polling is bounded by ``timeout`` measured from submission. Callers
    can stop it sooner by cancelling the awaiting task (for example with
    ``asyncio.timeout``); no cancellation is sent to the backend and the
    operation may still finish there.
    """

    def __init__(
        self,
        client: ShopifyAdminClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        sync_variant_threshold: int = DEFAULT_SYNC_VARIANT_THRESHOLD,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Admin API client.
            poll_interval: Seconds between operation polls.
            timeout: Seconds from submission before giving up.
            sync_variant_threshold: Largest variant count submitted with
                the synchronous execution hint.
            sleep: Awaitable sleep, injectable for tests.
            clock: Monotonic clock, injectable for tests.
        """
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.sync_variant_threshold = sync_variant_threshold
        self._sleep = sleep
        self._clock = clock

    def prefers_synchronous(self, request: CreateProductRequest) -> bool:
        """Small products are submitted with the synchronous hint."""
        return len(request.variants) <= self.sync_variant_threshold

    async def submit(self, request: CreateProductRequest) -> CreationOutcome:
        """Send the ``productSet`` mutation and classify its result."""
        synchronous = self.prefers_synchronous(request)
        logger.info(
            "Submitting product",
            title=request.title,
            variants=len(request.variants),
            synchronous=synchronous,
        )
        data = await self.client.execute(
            PRODUCT_SET_MUTATION,
            {"input": build_product_set_input(request), "synchronous": synchronous},
        )
        return parse_product_set(data)

    async def fetch_operation(self, handle: str) -> Operation:
        """Fetch the current state of a product operation."""
        data = await self.client.execute(PRODUCT_OPERATION_QUERY, {"id": handle})
        raw = data.get("productOperation")
        if not isinstance(raw, dict):
            raise ProtocolViolationError(
                f"Product operation {handle} not found",
                details={"operation_id": handle},
            )
        return Operation.from_response(raw)

    async def create(
        self,
        request: CreateProductRequest,
        timeout: float | None = None,
    ) -> str:
        """Create a product and wait for its id.

        Args:
            request: Validated create request.
            timeout: Overrides the configured polling timeout.

        Returns:
            Global id of the created product.

        Raises:
            CreationRejectedError: If the backend rejects the product.
            CreationTimedOutError: If the operation is still running at
                the deadline.
            ProtocolViolationError: If the backend breaks its contract.
            TransportError: On request failures (not retried).
        """
        timeout = self.timeout if timeout is None else timeout
        started = self._clock()
        state = CreationState.SUBMITTED

        try:
            outcome = await self.submit(request)

            if isinstance(outcome, Immediate):
                validate_creation_transition(state, CreationState.DONE)
                logger.info("Product created synchronously", product_id=outcome.product_id)
                return outcome.product_id

            if outcome.is_complete:
                product_id = self._completed_product_id(outcome)
                validate_creation_transition(state, CreationState.DONE)
                return product_id

            state = validate_creation_transition(state, CreationState.PENDING)
            logger.info(
                "Product creation pending",
                operation_id=outcome.handle,
                status=outcome.status,
            )
            product_id = await self._poll(outcome, started, timeout)
            validate_creation_transition(state, CreationState.DONE)
            return product_id

        except CatalogError as e:
            validate_creation_transition(state, CreationState.FAILED)
            logger.warning(
                "Product creation failed",
                error_code=e.error_code,
                error=e.message,
            )
            raise

    async def _poll(self, operation: Operation, started: float, timeout: float) -> str:
        """Poll an operation until it completes, fails or times out."""
        deadline = started + timeout
        last_status = operation.status
        polls = 0

        try:
            while True:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise CreationTimedOutError(operation.handle, last_status, timeout)

                await self._sleep(min(self.poll_interval, remaining))
                current = await self.fetch_operation(operation.handle)
                polls += 1

                if current.user_errors:
                    raise CreationRejectedError(current.user_errors)
                if current.is_complete:
                    logger.info(
                        "Product operation completed",
                        operation_id=operation.handle,
                        polls=polls,
                    )
                    return self._completed_product_id(current)

                last_status = current.status
                logger.debug(
                    "Product operation still running",
                    operation_id=operation.handle,
                    status=last_status,
                    polls=polls,
                )
        except asyncio.CancelledError:
            logger.info(
                "Stopped polling product operation",
                operation_id=operation.handle,
                last_status=last_status,
                polls=polls,
            )
            raise

    @staticmethod
    def _completed_product_id(operation: Operation) -> str:
        if not operation.product_id:
            raise ProtocolViolationError(
                f"Product operation {operation.handle} completed without a product",
                details={"operation_id": operation.handle},
            )
        return operation.product_id

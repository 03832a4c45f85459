"""State machines for product creation.

Tracks a creation request from submission to its terminal outcome and
maps backend operation statuses onto it.
"""

from enum import Enum

from shopcatalog.domain.exceptions import InvalidStateTransitionError


class CreationState(str, Enum):
    """Product creation lifecycle.

    State diagram:
        SUBMITTED ──────────────┬──────────────► FAILED
          │                     │                  ▲
          │ immediate result    │ async handle     │
          ▼                     ▼                  │
        DONE ◄───────────── PENDING ───────────────┘
                  complete            rejected / timed out
    """

    SUBMITTED = "submitted"
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"

    def can_transition_to(self, target: "CreationState") -> bool:
        """Check if transition to target state is valid."""
        return target in _CREATION_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["CreationState"]:
        """Get list of valid target states."""
        return list(_CREATION_TRANSITIONS.get(self, set()))

    def is_terminal(self) -> bool:
        """Check if no further transitions are possible."""
        return len(_CREATION_TRANSITIONS.get(self, set())) == 0


_CREATION_TRANSITIONS: dict[CreationState, set[CreationState]] = {
    CreationState.SUBMITTED: {CreationState.DONE, CreationState.PENDING, CreationState.FAILED},
    CreationState.PENDING: {CreationState.DONE, CreationState.FAILED},
    CreationState.DONE: set(),
    CreationState.FAILED: set(),
}


def validate_creation_transition(
    current: CreationState,
    target: CreationState,
) -> CreationState:
    """Validate a creation state transition.

    Args:
        current: Current state.
        target: Requested state.

    Returns:
        The target state.

    Raises:
        InvalidStateTransitionError: If the transition is not allowed.
    """
    if not current.can_transition_to(target):
        raise InvalidStateTransitionError(
            current_state=current.value,
            target_state=target.value,
            allowed_transitions=sorted(s.value for s in current.allowed_transitions()),
        )
    return target


class OperationStatus(str, Enum):
    """Backend status of an asynchronous product operation."""

    CREATED = "CREATED"
    ACTIVE = "ACTIVE"
    COMPLETE = "COMPLETE"

    @classmethod
    def is_complete(cls, status: str | None) -> bool:
        """Check if a raw backend status means the operation has finished."""
        return status == cls.COMPLETE.value

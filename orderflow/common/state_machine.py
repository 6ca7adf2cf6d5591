"""Order and payment status transitions enforced by the orders service."""

from orderflow.common.errors import InvalidTransitionError

# Strict forward chain; FINALIZED is terminal.
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "RECEIVED": {"IN_PREPARATION"},
    "IN_PREPARATION": {"READY"},
    "READY": {"FINALIZED"},
    "FINALIZED": set(),
}

ALLOWED_PAYMENT_TRANSITIONS: dict[str, set[str]] = {
    "PENDING": {"PAID", "REFUSED", "CANCELLED"},
    "REFUSED": {"PAID", "CANCELLED"},
    "PAID": {"CANCELLED"},
    "CANCELLED": set(),
}


def validate_transition(current: str, new: str) -> None:
    """Raise when an order status transition is not allowed."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot change status from {current} to {new}")


def validate_payment_transition(current: str, new: str) -> None:
    """Raise when a payment status transition is not allowed."""

    if new not in ALLOWED_PAYMENT_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"Cannot change payment status from {current} to {new}")

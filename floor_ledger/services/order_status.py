"""Order status transition helpers."""

from __future__ import annotations

from floor_ledger.schemas.order import Order

ORDER_STATUSES: list[str] = ["ongoing", "completed", "cancelled"]

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "ongoing": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def is_editable(order: Order) -> bool:
    """Only ongoing orders accept item, discount and table changes."""
    return order.status == "ongoing"


def set_status(order: Order, new_status: str) -> bool:
    """Apply a status transition; return False when it is not allowed."""
    if not can_transition(order.status, new_status):
        return False
    order.status = new_status
    return True

"""Pure money and print-delta calculations over orders."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from floor_ledger.schemas.order import Order, OrderItem, OrderTotals

CENT: Decimal = Decimal("0.01")
HUNDRED: Decimal = Decimal("100")
SPLIT_TOLERANCE: Decimal = Decimal("0.01")


def quantize_money(value: Decimal | int | float) -> Decimal:
    """Round a money value to cents."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def clamp_percentage(value: Decimal | int | float) -> Decimal:
    """Clamp a discount percentage into [0, 100]."""
    percentage = Decimal(str(value))
    return max(Decimal("0"), min(HUNDRED, percentage))


def calculate_subtotal(items: list[OrderItem]) -> Decimal:
    return sum((item.price * item.quantity for item in items), Decimal("0"))


def calculate_order_totals(order: Order) -> OrderTotals:
    """Return subtotal, discount and total; no tax or service charge applies."""
    subtotal = calculate_subtotal(order.items)
    discount_amount = subtotal * clamp_percentage(order.discount_percentage) / HUNDRED
    total = max(Decimal("0"), subtotal - discount_amount)
    return OrderTotals(
        subtotal=quantize_money(subtotal),
        discount_amount=quantize_money(discount_amount),
        total=quantize_money(total),
    )


def discount_percentage_from_amount(amount: Decimal, subtotal: Decimal) -> Decimal | None:
    """Convert a flat discount to a percentage of the current subtotal.

    Returns None when no percentage can be derived (negative amount or an
    empty order).
    """
    if amount < 0 or subtotal <= 0:
        return None
    return clamp_percentage(min(HUNDRED, amount / subtotal * HUNDRED))


def print_delta(order: Order) -> dict[str, int]:
    """Quantities added per item since the last save, zero deltas omitted."""
    delta: dict[str, int] = {}
    for item in order.items:
        added = max(0, item.quantity - order.saved_quantities.get(item.menu_item_id, 0))
        if added > 0:
            delta[item.menu_item_id] = added
    return delta


def delta_order(order: Order) -> Order:
    """Copy of the order holding only the not-yet-printed quantities."""
    delta = print_delta(order)
    items = [
        item.model_copy(update={"quantity": delta[item.menu_item_id]})
        for item in order.items
        if item.menu_item_id in delta
    ]
    return order.model_copy(update={"items": items}, deep=True)


def amounts_match(paid: Decimal, expected: Decimal) -> bool:
    """Split allocations must equal the expected amount within one cent."""
    return abs(paid - expected) < SPLIT_TOLERANCE

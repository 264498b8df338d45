"""Order ledger: items, discount, customer assignment, save snapshot and status."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import uuid4

from floor_ledger.schemas.order import Order, OrderItem
from floor_ledger.schemas.payment import PaymentInfo
from floor_ledger.schemas.state import LedgerState
from floor_ledger.services.order_calculations import (
    calculate_subtotal,
    clamp_percentage,
    discount_percentage_from_amount,
)
from floor_ledger.services.order_status import is_editable, set_status
from floor_ledger.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


def fold_item(items: list[OrderItem], item: OrderItem) -> None:
    """Add ``item`` to ``items`` merging by menu item id.

    An existing line gains the quantity and takes the new modifier list.
    """
    for existing in items:
        if existing.menu_item_id == item.menu_item_id:
            existing.quantity += item.quantity
            existing.modifiers = list(item.modifiers)
            return
    items.append(item.model_copy(deep=True))


class OrderLedger:
    """Owns ``Order`` records and the ongoing/completed indices."""

    def __init__(self, state: LedgerState, clock: Clock = utc_now) -> None:
        self.state = state
        self.clock = clock

    def get(self, order_id: str) -> Order | None:
        return self.state.orders_by_id.get(order_id)

    def _editable(self, order_id: str) -> Order | None:
        order = self.get(order_id)
        if order is None or not is_editable(order):
            return None
        return order

    def create_order(self, table_id: str, merged_table_ids: list[str] | None = None) -> Order:
        order = Order(
            id=uuid4().hex,
            table_id=table_id,
            merged_table_ids=list(merged_table_ids) if merged_table_ids else None,
            is_merged_order=bool(merged_table_ids),
            created_at=self.clock(),
        )
        self.insert_ongoing(order)
        logger.info("[ORDERS] Created %s on %s", order.id, table_id)
        return order

    def insert_ongoing(self, order: Order) -> None:
        self.state.orders_by_id[order.id] = order
        self.state.ongoing_order_ids.insert(0, order.id)

    def discard(self, order_id: str) -> None:
        """Drop an order from the record set and every index."""
        self.state.orders_by_id.pop(order_id, None)
        self.state.ongoing_order_ids = [oid for oid in self.state.ongoing_order_ids if oid != order_id]
        self.state.completed_order_ids = [oid for oid in self.state.completed_order_ids if oid != order_id]

    def add_item(self, order_id: str, item: OrderItem) -> Order | None:
        order = self._editable(order_id)
        if order is None:
            return None
        fold_item(order.items, item)
        return order

    def remove_item(self, order_id: str, menu_item_id: str) -> Order | None:
        order = self._editable(order_id)
        if order is None:
            return None
        order.items = [item for item in order.items if item.menu_item_id != menu_item_id]
        return order

    def update_item_quantity(self, order_id: str, menu_item_id: str, quantity: int) -> Order | None:
        if quantity <= 0:
            return self.remove_item(order_id, menu_item_id)
        order = self._editable(order_id)
        if order is None:
            return None
        for item in order.items:
            if item.menu_item_id == menu_item_id:
                item.quantity = quantity
        return order

    def apply_discount(self, order_id: str, discount_percentage: Decimal | int | float) -> Order | None:
        order = self._editable(order_id)
        if order is None:
            return None
        order.discount_percentage = clamp_percentage(discount_percentage)
        return order

    def apply_discount_amount(self, order_id: str, amount: Decimal | None) -> Order | None:
        """Store a flat discount as a percentage of the subtotal right now."""
        order = self._editable(order_id)
        if order is None or amount is None:
            return None
        percentage = discount_percentage_from_amount(Decimal(str(amount)), calculate_subtotal(order.items))
        if percentage is None:
            return None
        order.discount_percentage = percentage
        return order

    def set_order_customer(
        self,
        order_id: str,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> Order | None:
        order = self._editable(order_id)
        if order is None:
            return None
        order.customer_name = (customer_name or "").strip() or None
        order.customer_phone = (customer_phone or "").strip() or None
        return order

    def mark_order_saved(self, order_id: str) -> None:
        order = self.get(order_id)
        if order is not None:
            order.is_saved = True

    def snapshot_saved_quantities(self, order_id: str) -> None:
        order = self.get(order_id)
        if order is not None:
            order.saved_quantities = {item.menu_item_id: item.quantity for item in order.items}

    def set_payment(self, order_id: str, payment: PaymentInfo) -> None:
        order = self._editable(order_id)
        if order is not None:
            order.payment = payment

    def complete_order(self, order_id: str) -> bool:
        order = self.get(order_id)
        if order is None or not set_status(order, "completed"):
            return False
        self.state.ongoing_order_ids = [oid for oid in self.state.ongoing_order_ids if oid != order_id]
        self.state.completed_order_ids.insert(0, order_id)
        logger.info("[ORDERS] Completed %s", order_id)
        return True

    def cancel_order(self, order_id: str) -> bool:
        order = self.get(order_id)
        if order is None or not set_status(order, "cancelled"):
            return False
        self.discard(order_id)
        logger.info("[ORDERS] Cancelled %s", order_id)
        return True

    def change_order_table(self, order_id: str, new_table_id: str) -> Order | None:
        order = self._editable(order_id)
        if order is None:
            return None
        order.table_id = new_table_id
        return order

    def ongoing_orders(self) -> list[Order]:
        return [self.state.orders_by_id[oid] for oid in self.state.ongoing_order_ids if oid in self.state.orders_by_id]

    def completed_orders(self) -> list[Order]:
        return [self.state.orders_by_id[oid] for oid in self.state.completed_order_ids if oid in self.state.orders_by_id]

    def ongoing_order_for_table(self, table_id: str) -> Order | None:
        for order in self.ongoing_orders():
            if order.table_id == table_id:
                return order
        return None

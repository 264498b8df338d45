"""Floor ledger controller: the single owner of the table, order and customer state.

Every public command either applies completely or is declined as a no-op.
Compound commands (merging, settlement) run inside :meth:`FloorLedger.transaction`
so a failure part-way through restores the previous state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from functools import wraps
from typing import Any

from floor_ledger.schemas.order import Order, OrderItem, OrderTotals
from floor_ledger.schemas.payment import SplitPayment
from floor_ledger.schemas.state import CommandResult, LedgerState, SalesSummary
from floor_ledger.schemas.table import Table
from floor_ledger.services.customer_service import CustomerCreditLedger
from floor_ledger.services.errors import PreconditionFailedError
from floor_ledger.services.merge_service import MergeOrchestrator
from floor_ledger.services.order_calculations import calculate_order_totals, delta_order, print_delta
from floor_ledger.services.order_service import OrderLedger
from floor_ledger.services.payment_service import PaymentReconciler
from floor_ledger.services.printing import PrintResult, TicketPrinter
from floor_ledger.services.report_service import sales_summary
from floor_ledger.services.table_service import TableRegistry
from floor_ledger.utils.time import Clock, today_window_utc, utc_now

logger = logging.getLogger(__name__)


def _declined(reason: str) -> CommandResult:
    logger.info("[LEDGER] Declined: %s", reason)
    return CommandResult.declined(reason)


def serialized(method: Callable[..., Any]) -> Callable[..., Any]:
    """Run a ledger method while holding the ledger lock."""

    @wraps(method)
    def wrapper(self: FloorLedger, *args: Any, **kwargs: Any) -> Any:
        with self.lock:
            return method(self, *args, **kwargs)

    return wrapper


class FloorLedger:
    """Command and query surface over one explicit :class:`LedgerState`."""

    def __init__(self, state: LedgerState | None = None, clock: Clock = utc_now) -> None:
        self.state = state if state is not None else LedgerState()
        self.clock = clock
        self.lock = threading.RLock()
        self.tables = TableRegistry(self.state, clock)
        self.orders = OrderLedger(self.state, clock)
        self.customers = CustomerCreditLedger(self.state, clock)
        self.merges = MergeOrchestrator(self.tables, self.orders)
        self.payments = PaymentReconciler(self.orders, self.customers)

    @contextmanager
    def transaction(self) -> Iterator[LedgerState]:
        """Apply a group of updates as one unit; restore the state if any raises.

        The ledger lock is held throughout, so no other thread sees or writes
        the state between the snapshot and the restore.
        """
        with self.lock:
            snapshot = self.state.model_copy(deep=True)
            try:
                yield self.state
            except Exception:
                for field_name in LedgerState.model_fields:
                    setattr(self.state, field_name, getattr(snapshot, field_name))
                raise

    # Tables

    @serialized
    def seed_default_tables(self) -> bool:
        return self.tables.seed_default_tables()

    @serialized
    def add_table(self, name: str, seats: int = 4, description: str | None = None) -> Table:
        return self.tables.add_table(name, seats, description)

    @serialized
    def update_table(self, table_id: str, name: str, seats: int | None = None, description: str | None = None) -> CommandResult:
        if self.tables.update_table(table_id, name, seats, description) is None:
            return _declined(f"Table {table_id} not found")
        return CommandResult.ok(table_id=table_id)

    @serialized
    def remove_table(self, table_id: str) -> CommandResult:
        table = self.tables.get(table_id)
        if table is None:
            return _declined(f"Table {table_id} not found")
        if table.is_merged:
            return _declined("Unmerge the table instead of removing it")
        if self.tables.merge_parent_of(table_id) is not None:
            return _declined(f"Table {table.name} is part of a merged table")
        if self.orders.ongoing_order_for_table(table_id) is not None:
            return _declined(f"Table {table.name} has an ongoing order")
        self.tables.remove_table(table_id)
        return CommandResult.ok(table_id=table_id)

    @serialized
    def toggle_table_status(self, table_id: str) -> CommandResult:
        table = self.tables.get(table_id)
        if table is None:
            return _declined(f"Table {table_id} not found")
        if table.is_merged or self.tables.merge_parent_of(table_id) is not None:
            return _declined("Merged tables are managed through merge and unmerge")
        self.tables.toggle_table_status(table_id)
        return CommandResult.ok(table_id=table_id)

    @serialized
    def reserve_table(
        self,
        table_id: str,
        reserved_by: str | None = None,
        reserved_until: datetime | None = None,
        reserved_note: str | None = None,
    ) -> CommandResult:
        if self.tables.reserve_table(table_id, reserved_by, reserved_until, reserved_note) is None:
            return _declined(f"Table {table_id} not found")
        return CommandResult.ok(table_id=table_id)

    @serialized
    def unreserve_table(self, table_id: str) -> CommandResult:
        if self.tables.unreserve_table(table_id) is None:
            return _declined(f"Table {table_id} not found")
        return CommandResult.ok(table_id=table_id)

    @serialized
    def merge_tables(
        self,
        table_ids: list[str],
        merged_name: str | None = None,
        merged_table_id: str | None = None,
    ) -> CommandResult:
        """Merge the tables and consolidate their ongoing orders in one step."""
        with self.transaction():
            result = self.merges.merge_tables(table_ids, merged_name, merged_table_id)
        if not result.accepted:
            logger.info("[LEDGER] Declined: %s", result.reason)
        return result

    @serialized
    def unmerge_tables(self, merged_table_id: str) -> CommandResult:
        result = self.merges.unmerge_tables(merged_table_id)
        if not result.accepted:
            logger.info("[LEDGER] Declined: %s", result.reason)
        return result

    # Orders

    @serialized
    def create_order(self, table_id: str, merged_table_ids: list[str] | None = None) -> CommandResult:
        table = self.tables.get(table_id)
        if table is None:
            return _declined(f"Table {table_id} not found")
        if not table.is_active:
            return _declined(f"Table {table.name} is not active")
        if self.orders.ongoing_order_for_table(table_id) is not None:
            return _declined(f"Table {table.name} already has an ongoing order")
        if merged_table_ids is None and table.is_merged:
            merged_table_ids = table.merged_tables
        order = self.orders.create_order(table_id, merged_table_ids)
        return CommandResult.ok(table_id=table_id, order_id=order.id)

    @serialized
    def open_order(self, table_id: str) -> Order | None:
        """Return the table's ongoing order, creating an empty one if needed."""
        existing = self.orders.ongoing_order_for_table(table_id)
        if existing is not None:
            return existing
        result = self.create_order(table_id)
        if not result.accepted:
            return None
        return self.orders.get(result.order_id)

    @serialized
    def add_item(self, order_id: str, item: OrderItem) -> CommandResult:
        if self.orders.add_item(order_id, item) is None:
            return _declined(f"Order {order_id} is not open")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def add_item_to_table(self, table_id: str, item: OrderItem) -> CommandResult:
        """Add a line to the table's ongoing order, opening one on the first item."""
        with self.transaction():
            order = self.open_order(table_id)
            if order is None:
                return _declined(f"Table {table_id} cannot take orders")
            self.orders.add_item(order.id, item)
        return CommandResult.ok(table_id=table_id, order_id=order.id)

    @serialized
    def remove_item(self, order_id: str, menu_item_id: str) -> CommandResult:
        if self.orders.remove_item(order_id, menu_item_id) is None:
            return _declined(f"Order {order_id} is not open")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def update_item_quantity(self, order_id: str, menu_item_id: str, quantity: int) -> CommandResult:
        if self.orders.update_item_quantity(order_id, menu_item_id, quantity) is None:
            return _declined(f"Order {order_id} is not open")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def apply_discount(self, order_id: str, discount_percentage: Decimal | int | float) -> CommandResult:
        if self.orders.apply_discount(order_id, discount_percentage) is None:
            return _declined(f"Order {order_id} is not open")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def apply_discount_amount(self, order_id: str, amount: Decimal | None) -> CommandResult:
        if self.orders.apply_discount_amount(order_id, amount) is None:
            return _declined("Enter a discount amount for an open order with items")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def set_order_customer(
        self,
        order_id: str,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> CommandResult:
        if self.orders.set_order_customer(order_id, customer_name, customer_phone) is None:
            return _declined(f"Order {order_id} is not open")
        return CommandResult.ok(order_id=order_id)

    @serialized
    def change_order_table(self, order_id: str, new_table_id: str) -> CommandResult:
        order = self.orders.get(order_id)
        if order is None or order.status != "ongoing":
            return _declined(f"Order {order_id} is not open")
        if order.is_merged_order:
            return _declined("Merged orders cannot change table")
        table = self.tables.get(new_table_id)
        if table is None or not table.is_active:
            return _declined(f"Table {new_table_id} is not available")
        if self.tables.is_reserved(new_table_id):
            return _declined(f"Table {table.name} is reserved")
        occupant = self.orders.ongoing_order_for_table(new_table_id)
        if occupant is not None and occupant.id != order_id:
            return _declined(f"Table {table.name} already has an ongoing order")
        self.orders.change_order_table(order_id, new_table_id)
        return CommandResult.ok(order_id=order_id, table_id=new_table_id)

    @serialized
    def cancel_order(self, order_id: str) -> CommandResult:
        """Cancel the order, then release its merged table if it had one."""
        order = self.orders.get(order_id)
        if order is None:
            return _declined(f"Order {order_id} not found")
        table_id = order.table_id
        with self.transaction():
            if not self.orders.cancel_order(order_id):
                return _declined(f"Order {order_id} is already closed")
            self._release_merged_table(table_id)
        return CommandResult.ok(order_id=order_id, table_id=table_id)

    @serialized
    def save_order(self, order_id: str, printer: TicketPrinter | None = None) -> PrintResult:
        """Send the not-yet-printed quantities to the printer and snapshot them.

        Without a printer the save is an explicit skip: quantities are still
        snapshotted. A failed print leaves the snapshot untouched so the same
        lines are sent again next time.
        """
        order = self.orders.get(order_id)
        if order is None:
            return PrintResult(success=False, message=f"Order {order_id} not found")
        pending = delta_order(order)
        if not pending.items:
            result = PrintResult(success=True, message="Nothing new to print")
        elif printer is None:
            result = PrintResult(success=True, message="Saved without printing")
        else:
            result = printer.print_tickets(pending, self.tables.get(order.table_id))
        if result.success:
            self.orders.mark_order_saved(order_id)
            self.orders.snapshot_saved_quantities(order_id)
        else:
            logger.warning("[PRINT] Ticket for %s failed: %s", order_id, result.message)
        return result

    # Payments

    @serialized
    def settle_payment(
        self,
        order_id: str,
        method: str,
        amount_paid: Decimal | None = None,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> CommandResult:
        """Settle with one method; raises CustomerRequiredError for unresolvable Credit."""
        with self._settlement(order_id) as table_id:
            result = self.payments.settle_payment(order_id, method, amount_paid, customer_name, customer_phone)
            if result.accepted:
                self._release_merged_table(table_id)
        if not result.accepted:
            logger.info("[LEDGER] Declined: %s", result.reason)
        return result

    @serialized
    def settle_split_payment(
        self,
        order_id: str,
        splits: list[SplitPayment],
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> CommandResult:
        """Settle across several methods that must sum to the total."""
        with self._settlement(order_id) as table_id:
            result = self.payments.settle_split_payment(order_id, splits, customer_name, customer_phone)
            if result.accepted:
                self._release_merged_table(table_id)
        if not result.accepted:
            logger.info("[LEDGER] Declined: %s", result.reason)
        return result

    @serialized
    def settle_customer_credit(
        self,
        customer_id: str,
        amount: Decimal,
        method: str = "Cash",
        splits: list[SplitPayment] | None = None,
    ) -> CommandResult:
        with self.transaction():
            result = self.payments.settle_customer_credit(customer_id, amount, method, splits)
        if not result.accepted:
            logger.info("[LEDGER] Declined: %s", result.reason)
        return result

    @contextmanager
    def _settlement(self, order_id: str) -> Iterator[str | None]:
        order = self.orders.get(order_id)
        try:
            with self.transaction():
                yield order.table_id if order is not None else None
        except PreconditionFailedError as exc:
            logger.warning("[LEDGER] Settlement of %s blocked: %s", order_id, exc)
            raise

    def _release_merged_table(self, table_id: str | None) -> None:
        if table_id is None:
            return
        table = self.tables.get(table_id)
        if table is not None and table.is_merged:
            self.merges.unmerge_tables(table_id)

    # Queries

    def get_table(self, table_id: str) -> Table | None:
        return self.tables.get(table_id)

    def get_order(self, order_id: str) -> Order | None:
        return self.orders.get(order_id)

    @serialized
    def order_totals(self, order_id: str) -> OrderTotals | None:
        order = self.orders.get(order_id)
        if order is None:
            return None
        return calculate_order_totals(order)

    @serialized
    def print_delta(self, order_id: str) -> dict[str, int]:
        order = self.orders.get(order_id)
        if order is None:
            return {}
        return print_delta(order)

    @serialized
    def sales_summary(self, start: datetime | None = None, end: datetime | None = None) -> SalesSummary:
        """Summarize today's settlements unless a window is given."""
        if start is None or end is None:
            start, end = today_window_utc(self.clock())
        return sales_summary(self.orders.completed_orders(), start, end)

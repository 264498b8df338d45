"""Merge orchestrator: folds tables and their ongoing orders into one, and back."""

from __future__ import annotations

import logging
from uuid import uuid4

from floor_ledger.schemas.order import Order
from floor_ledger.schemas.state import CommandResult
from floor_ledger.schemas.table import Table
from floor_ledger.services.order_service import OrderLedger, fold_item
from floor_ledger.services.table_service import TableRegistry, reservation_is_active

logger = logging.getLogger(__name__)


class MergeOrchestrator:
    """Applies table merges across the table registry and the order ledger."""

    def __init__(self, tables: TableRegistry, orders: OrderLedger) -> None:
        self.tables = tables
        self.orders = orders

    def _validate_members(self, table_ids: list[str]) -> str | None:
        now = self.tables.clock()
        for table_id in table_ids:
            table = self.tables.get(table_id)
            if table is None:
                return f"Table {table_id} not found"
            if table.is_merged:
                return f"Table {table.name} is already a merged table"
            if not table.is_active or self.tables.merge_parent_of(table_id) is not None:
                return f"Table {table.name} is not active"
            if reservation_is_active(table, now):
                return f"Table {table.name} is reserved"
        return None

    def merge_tables(
        self,
        table_ids: list[str],
        merged_name: str | None = None,
        merged_table_id: str | None = None,
    ) -> CommandResult:
        member_ids = list(dict.fromkeys(table_ids))
        if len(member_ids) < 2:
            return CommandResult.declined("Select at least 2 tables to merge")

        reason = self._validate_members(member_ids)
        if reason is not None:
            return CommandResult.declined(reason)

        new_table_id = merged_table_id or f"merged-{uuid4().hex[:8]}"
        if self.tables.get(new_table_id) is not None:
            return CommandResult.declined(f"Table {new_table_id} already exists")

        members = [self.tables.get(table_id) for table_id in member_ids]
        member_names = [table.name for table in members]
        total_seats = sum(table.seats for table in members)
        merged_table = Table(
            id=new_table_id,
            name=(merged_name or "").strip() or f"Merged ({' + '.join(member_names)})",
            seats=total_seats,
            description=f"Merged tables: {', '.join(member_names)}",
            is_active=True,
            created_at=self.tables.clock(),
            is_merged=True,
            merged_tables=member_ids,
            merged_table_names=member_names,
            total_seats=total_seats,
        )
        self.tables.insert(merged_table)
        for table_id in member_ids:
            self.tables.set_active(table_id, False)

        merged_order = self._consolidate_orders(member_ids, new_table_id)
        logger.info(
            "[MERGE] %s -> %s (%s seats, order %s)",
            member_ids,
            new_table_id,
            total_seats,
            merged_order.id if merged_order else "-",
        )
        return CommandResult.ok(table_id=new_table_id, order_id=merged_order.id if merged_order else None)

    def _consolidate_orders(self, member_ids: list[str], merged_table_id: str) -> Order | None:
        sources: list[Order] = []
        for table_id in member_ids:
            order = self.orders.ongoing_order_for_table(table_id)
            if order is not None:
                sources.append(order)
        if not sources:
            return None

        merged_order = Order(
            id=uuid4().hex,
            table_id=merged_table_id,
            is_merged_order=True,
            merged_table_ids=list(member_ids),
            created_at=min(order.created_at for order in sources),
        )
        for source in sources:
            for item in source.items:
                fold_item(merged_order.items, item)
            for menu_item_id, quantity in source.saved_quantities.items():
                merged_order.saved_quantities[menu_item_id] = merged_order.saved_quantities.get(menu_item_id, 0) + quantity
            merged_order.is_saved = merged_order.is_saved or source.is_saved
            if merged_order.customer_name is None and merged_order.customer_phone is None:
                merged_order.customer_name = source.customer_name
                merged_order.customer_phone = source.customer_phone

        for source in sources:
            self.orders.discard(source.id)
        self.orders.insert_ongoing(merged_order)
        return merged_order

    def unmerge_tables(self, merged_table_id: str) -> CommandResult:
        merged_table = self.tables.get(merged_table_id)
        if merged_table is None or not merged_table.is_merged:
            return CommandResult.declined(f"Table {merged_table_id} is not a merged table")
        if self.orders.ongoing_order_for_table(merged_table_id) is not None:
            return CommandResult.declined("Settle or cancel the merged order before unmerging")

        for table_id in merged_table.merged_tables or []:
            self.tables.set_active(table_id, True)
        self.tables.remove_table(merged_table_id)
        logger.info("[MERGE] Unmerged %s -> %s", merged_table_id, merged_table.merged_tables)
        return CommandResult.ok(table_id=merged_table_id)

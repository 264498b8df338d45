"""Ledger state tree and command outcomes."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from floor_ledger.schemas.customer import Customer
from floor_ledger.schemas.order import Order
from floor_ledger.schemas.table import Table


class LedgerState(BaseModel):
    """Full in-memory state owned by one ledger instance."""

    tables_by_id: dict[str, Table] = Field(default_factory=dict)
    table_ids: list[str] = Field(default_factory=list)
    next_table_id: int = 1
    is_initialized: bool = False
    orders_by_id: dict[str, Order] = Field(default_factory=dict)
    ongoing_order_ids: list[str] = Field(default_factory=list)
    completed_order_ids: list[str] = Field(default_factory=list)
    customers_by_id: dict[str, Customer] = Field(default_factory=dict)


class CommandResult(BaseModel):
    """Outcome of a ledger command: applied, or declined as a no-op."""

    accepted: bool
    reason: str | None = None
    table_id: str | None = None
    order_id: str | None = None
    customer_id: str | None = None
    change: Decimal | None = None

    @classmethod
    def ok(cls, **fields) -> CommandResult:
        return cls(accepted=True, **fields)

    @classmethod
    def declined(cls, reason: str) -> CommandResult:
        return cls(accepted=False, reason=reason)


class SalesSummary(BaseModel):
    """Completed-order totals for a time window."""

    order_count: int = 0
    gross_sales: Decimal = Decimal("0.00")
    discounts: Decimal = Decimal("0.00")
    net_sales: Decimal = Decimal("0.00")
    credit_issued: Decimal = Decimal("0.00")
    credit_repaid: Decimal = Decimal("0.00")
    by_method: dict[str, Decimal] = Field(default_factory=dict)

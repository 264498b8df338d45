"""Schema exports."""

from floor_ledger.schemas.customer import CreditSettlementRequest, Customer
from floor_ledger.schemas.order import (
    ChangeTableRequest,
    DiscountRequest,
    ItemQuantityUpdate,
    Order,
    OrderCreate,
    OrderCustomerRequest,
    OrderItem,
    OrderResponse,
    OrderTotals,
)
from floor_ledger.schemas.payment import PaymentInfo, SettlePaymentRequest, SettleSplitRequest, SplitPayment
from floor_ledger.schemas.state import CommandResult, LedgerState, SalesSummary
from floor_ledger.schemas.table import MergeTablesRequest, ReservationRequest, Table, TableCreate, TableUpdate

__all__ = [
    "ChangeTableRequest",
    "CommandResult",
    "CreditSettlementRequest",
    "Customer",
    "DiscountRequest",
    "ItemQuantityUpdate",
    "LedgerState",
    "MergeTablesRequest",
    "Order",
    "OrderCreate",
    "OrderCustomerRequest",
    "OrderItem",
    "OrderResponse",
    "OrderTotals",
    "PaymentInfo",
    "ReservationRequest",
    "SalesSummary",
    "SettlePaymentRequest",
    "SettleSplitRequest",
    "SplitPayment",
    "Table",
    "TableCreate",
    "TableUpdate",
]

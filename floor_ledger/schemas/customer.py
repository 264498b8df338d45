"""Customer credit records and credit payloads."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from floor_ledger.schemas.payment import PaymentMethod, SplitPayment


class Customer(BaseModel):
    """Customer fields the ledger reads and writes."""

    id: str
    name: str
    phone: str | None = None
    credit_amount: Decimal = Decimal("0")
    visit_count: int = 0
    last_visit: datetime | None = None
    created_at: datetime


class CreditSettlementRequest(BaseModel):
    """Customer repays part or all of an outstanding credit balance."""

    amount: Decimal
    method: PaymentMethod = "Cash"
    splits: list[SplitPayment] | None = None

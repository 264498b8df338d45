"""Payment records and settlement payloads."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

PaymentMethod = Literal["Cash", "Card", "Bank", "Fonepay", "Credit", "Split"]
PAYMENT_METHODS: tuple[str, ...] = ("Cash", "Card", "Bank", "Fonepay", "Credit", "Split")


class SplitPayment(BaseModel):
    """One method's share of a split settlement."""

    method: PaymentMethod
    amount: Decimal


class PaymentInfo(BaseModel):
    """Settlement details attached to a completed order."""

    method: PaymentMethod
    amount: Decimal
    amount_paid: Decimal
    change: Decimal = Decimal("0")
    customer_name: str | None = None
    customer_phone: str | None = None
    timestamp: datetime
    split_payments: list[SplitPayment] | None = None
    credit_amount: Decimal | None = None


class SettlePaymentRequest(BaseModel):
    """Single-method settlement."""

    method: PaymentMethod
    amount_paid: Decimal | None = None
    customer_name: str | None = None
    customer_phone: str | None = None


class SettleSplitRequest(BaseModel):
    """Split settlement across several methods."""

    splits: list[SplitPayment] = Field(min_length=1)
    customer_name: str | None = None
    customer_phone: str | None = None

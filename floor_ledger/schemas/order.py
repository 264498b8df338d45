"""Order records, derived totals and order API payloads."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from floor_ledger.schemas.payment import PaymentInfo

OrderStatus = Literal["ongoing", "completed", "cancelled"]
OrderType = Literal["KOT", "BOT"]


class OrderItem(BaseModel):
    """Single order line keyed by menu item id."""

    menu_item_id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)
    modifiers: list[str] = Field(default_factory=list)
    order_type: OrderType = "KOT"


class Order(BaseModel):
    """Order bound to a standalone or merged table."""

    id: str
    table_id: str
    status: OrderStatus = "ongoing"
    items: list[OrderItem] = Field(default_factory=list)
    discount_percentage: Decimal = Decimal("0")
    payment: PaymentInfo | None = None
    is_saved: bool = False
    saved_quantities: dict[str, int] = Field(default_factory=dict)
    is_merged_order: bool = False
    merged_table_ids: list[str] | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    created_at: datetime


class OrderTotals(BaseModel):
    """Derived money totals for an order."""

    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal


class OrderCreate(BaseModel):
    """Open an order on a table."""

    table_id: str


class ItemQuantityUpdate(BaseModel):
    """Set one line's quantity; zero or less removes the line."""

    quantity: int


class DiscountRequest(BaseModel):
    """Discount given either as a percentage or as a flat amount."""

    percentage: Decimal | None = None
    amount: Decimal | None = None


class OrderCustomerRequest(BaseModel):
    """Assign or clear the customer on an order."""

    customer_name: str | None = None
    customer_phone: str | None = None


class ChangeTableRequest(BaseModel):
    """Move an order to another table."""

    new_table_id: str


class OrderResponse(BaseModel):
    """Serialized order with derived totals."""

    order: Order
    totals: OrderTotals

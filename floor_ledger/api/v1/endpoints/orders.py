"""Order ledger endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from floor_ledger.api.deps import LedgerCommit, get_ledger, get_ticket_printer
from floor_ledger.schemas.order import (
    ChangeTableRequest,
    DiscountRequest,
    ItemQuantityUpdate,
    Order,
    OrderCreate,
    OrderCustomerRequest,
    OrderItem,
    OrderResponse,
)
from floor_ledger.schemas.state import CommandResult
from floor_ledger.services.ledger_service import FloorLedger
from floor_ledger.services.order_calculations import calculate_order_totals
from floor_ledger.services.printing import PrintResult, TicketPrinter

router: APIRouter = APIRouter()


def _serialize_order(order: Order) -> OrderResponse:
    return OrderResponse(order=order.model_copy(deep=True), totals=calculate_order_totals(order))


@router.get("", response_model=list[OrderResponse])
def list_orders(
    status: Literal["ongoing", "completed"] = Query(default="ongoing"),
    ledger: FloorLedger = Depends(get_ledger),
) -> list[OrderResponse]:
    """Return ongoing or completed orders, most recent first."""
    with ledger.lock:
        orders = ledger.orders.ongoing_orders() if status == "ongoing" else ledger.orders.completed_orders()
        return [_serialize_order(order) for order in orders]


@router.post("", response_model=CommandResult)
def create_order(payload: OrderCreate, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.create_order, payload.table_id)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, ledger: FloorLedger = Depends(get_ledger)) -> OrderResponse:
    with ledger.lock:
        order = ledger.get_order(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")
        return _serialize_order(order)


@router.get("/{order_id}/delta", response_model=dict[str, int])
def get_print_delta(order_id: str, ledger: FloorLedger = Depends(get_ledger)) -> dict[str, int]:
    if ledger.get_order(order_id) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return ledger.print_delta(order_id)


@router.post("/{order_id}/items", response_model=CommandResult)
def add_item(order_id: str, item: OrderItem, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.add_item, order_id, item)


@router.post("/tables/{table_id}/items", response_model=CommandResult)
def add_item_to_table(table_id: str, item: OrderItem, commit: LedgerCommit = Depends()) -> CommandResult:
    """Add an item to the table's order, opening the order on the first item."""
    return commit(commit.ledger.add_item_to_table, table_id, item)


@router.put("/{order_id}/items/{menu_item_id}", response_model=CommandResult)
def update_item_quantity(
    order_id: str,
    menu_item_id: str,
    payload: ItemQuantityUpdate,
    commit: LedgerCommit = Depends(),
) -> CommandResult:
    return commit(commit.ledger.update_item_quantity, order_id, menu_item_id, payload.quantity)


@router.delete("/{order_id}/items/{menu_item_id}", response_model=CommandResult)
def remove_item(order_id: str, menu_item_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.remove_item, order_id, menu_item_id)


@router.post("/{order_id}/discount", response_model=CommandResult)
def apply_discount(order_id: str, payload: DiscountRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    """Apply a percentage, or convert a flat amount to one at today's subtotal."""
    if payload.percentage is not None:
        return commit(commit.ledger.apply_discount, order_id, payload.percentage)
    if payload.amount is not None:
        return commit(commit.ledger.apply_discount_amount, order_id, payload.amount)
    raise HTTPException(status_code=400, detail="Enter a discount percentage or amount")


@router.put("/{order_id}/customer", response_model=CommandResult)
def set_order_customer(order_id: str, payload: OrderCustomerRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.set_order_customer, order_id, payload.customer_name, payload.customer_phone)


@router.post("/{order_id}/table", response_model=CommandResult)
def change_order_table(order_id: str, payload: ChangeTableRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.change_order_table, order_id, payload.new_table_id)


@router.post("/{order_id}/save", response_model=PrintResult)
def save_order(
    order_id: str,
    print_tickets: bool = Query(default=True, alias="print"),
    commit: LedgerCommit = Depends(),
    printer: TicketPrinter = Depends(get_ticket_printer),
) -> PrintResult:
    """Print new quantities since the last save and snapshot them."""
    if commit.ledger.get_order(order_id) is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return commit.apply(commit.ledger.save_order, order_id, printer if print_tickets else None)


@router.post("/{order_id}/cancel", response_model=CommandResult)
def cancel_order(order_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.cancel_order, order_id)

"""Settlement endpoints."""

from fastapi import APIRouter, Depends

from floor_ledger.api.deps import LedgerCommit
from floor_ledger.schemas.payment import SettlePaymentRequest, SettleSplitRequest
from floor_ledger.schemas.state import CommandResult

router: APIRouter = APIRouter()


@router.post("/orders/{order_id}", response_model=CommandResult)
def settle_order(order_id: str, payload: SettlePaymentRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    """Settle an order with one payment method."""
    return commit(
        commit.ledger.settle_payment,
        order_id,
        payload.method,
        payload.amount_paid,
        payload.customer_name,
        payload.customer_phone,
    )


@router.post("/orders/{order_id}/split", response_model=CommandResult)
def settle_order_split(order_id: str, payload: SettleSplitRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    """Settle an order across several methods summing exactly to the total."""
    return commit(
        commit.ledger.settle_split_payment,
        order_id,
        payload.splits,
        payload.customer_name,
        payload.customer_phone,
    )

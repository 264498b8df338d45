"""Customer credit endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from floor_ledger.api.deps import LedgerCommit, get_ledger
from floor_ledger.schemas.customer import CreditSettlementRequest, Customer
from floor_ledger.schemas.state import CommandResult
from floor_ledger.services.ledger_service import FloorLedger

router: APIRouter = APIRouter()


@router.get("", response_model=list[Customer])
def list_customers(ledger: FloorLedger = Depends(get_ledger)) -> list[Customer]:
    with ledger.lock:
        return [customer.model_copy() for customer in ledger.customers.all_customers()]


@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: str, ledger: FloorLedger = Depends(get_ledger)) -> Customer:
    with ledger.lock:
        customer = ledger.customers.get(customer_id)
        if customer is None:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer.model_copy()


@router.post("/{customer_id}/credit/settle", response_model=CommandResult)
def settle_credit(customer_id: str, payload: CreditSettlementRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    """Record a repayment against the customer's outstanding credit."""
    return commit(commit.ledger.settle_customer_credit, customer_id, payload.amount, payload.method, payload.splits)

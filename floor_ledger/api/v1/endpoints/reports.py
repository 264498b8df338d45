"""Sales reporting endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from floor_ledger.api.deps import get_ledger
from floor_ledger.schemas.state import SalesSummary
from floor_ledger.services.ledger_service import FloorLedger

router: APIRouter = APIRouter()


@router.get("/sales", response_model=SalesSummary)
def get_sales_summary(
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    ledger: FloorLedger = Depends(get_ledger),
) -> SalesSummary:
    """Return settlement totals for a window, today (UTC) by default."""
    if (start is None) != (end is None):
        raise HTTPException(status_code=400, detail="Provide both start and end, or neither")
    if start is not None and start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end is not None and end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    if start is not None and end is not None and end <= start:
        raise HTTPException(status_code=400, detail="end must be after start")
    return ledger.sales_summary(start, end)

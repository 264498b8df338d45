"""API v1 router composition."""

from fastapi import APIRouter

from floor_ledger.api.v1.endpoints import customers, orders, payments, reports, tables

api_router: APIRouter = APIRouter()
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])

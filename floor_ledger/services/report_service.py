"""Sales summary over completed orders."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from floor_ledger.schemas.order import Order
from floor_ledger.schemas.state import SalesSummary
from floor_ledger.services.order_calculations import calculate_order_totals, quantize_money
from floor_ledger.services.payment_service import CREDIT_SETTLEMENT_ITEM_ID


def _is_credit_repayment(order: Order) -> bool:
    return any(item.menu_item_id == CREDIT_SETTLEMENT_ITEM_ID for item in order.items)


def sales_summary(orders: Iterable[Order], start: datetime, end: datetime) -> SalesSummary:
    """Summarize completed orders paid within ``[start, end)``.

    Split payments contribute each part to its own method. Credit repayment
    receipts are reported separately and do not count as sales.
    """
    summary = SalesSummary()
    by_method: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))

    for order in orders:
        payment = order.payment
        if order.status != "completed" or payment is None:
            continue
        if not start <= payment.timestamp < end:
            continue
        if _is_credit_repayment(order):
            summary.credit_repaid += payment.amount
            continue

        totals = calculate_order_totals(order)
        summary.order_count += 1
        summary.gross_sales += totals.subtotal
        summary.discounts += totals.discount_amount
        summary.net_sales += totals.total

        if payment.split_payments:
            for split in payment.split_payments:
                by_method[split.method] += split.amount
            summary.credit_issued += payment.credit_amount or Decimal("0")
        else:
            by_method[payment.method] += payment.amount
            if payment.method == "Credit":
                summary.credit_issued += payment.amount

    summary.gross_sales = quantize_money(summary.gross_sales)
    summary.discounts = quantize_money(summary.discounts)
    summary.net_sales = quantize_money(summary.net_sales)
    summary.credit_issued = quantize_money(summary.credit_issued)
    summary.credit_repaid = quantize_money(summary.credit_repaid)
    summary.by_method = {method: quantize_money(amount) for method, amount in sorted(by_method.items())}
    return summary

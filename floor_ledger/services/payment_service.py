"""Payment reconciler: single and split settlement, credit posting and repayment."""

from __future__ import annotations

import logging
from decimal import Decimal

from floor_ledger.schemas.customer import Customer
from floor_ledger.schemas.order import Order, OrderItem
from floor_ledger.schemas.payment import PAYMENT_METHODS, PaymentInfo, SplitPayment
from floor_ledger.schemas.state import CommandResult
from floor_ledger.services.customer_service import CustomerCreditLedger
from floor_ledger.services.errors import CustomerRequiredError
from floor_ledger.services.order_calculations import amounts_match, calculate_order_totals, quantize_money
from floor_ledger.services.order_service import OrderLedger
from floor_ledger.services.order_status import is_editable

logger = logging.getLogger(__name__)

CREDIT_SETTLEMENT_ITEM_ID: str = "CREDIT-SETTLEMENT"


def credit_table_id(customer_id: str) -> str:
    """Pseudo table id that credit repayment receipts are filed under."""
    return f"credit-{customer_id}"


def _customer_identity(order: Order, name: str | None, phone: str | None) -> tuple[str, str]:
    """Customer assigned on the order wins over what was typed at the till."""
    resolved_name = (order.customer_name or name or "").strip()
    resolved_phone = (order.customer_phone or phone or "").strip()
    return resolved_name, resolved_phone


def _validate_splits(splits: list[SplitPayment], expected: Decimal, allow_credit: bool = True) -> str | None:
    if not splits:
        return "Add at least one split payment"
    for split in splits:
        if split.method == "Split":
            return "Split parts need a concrete payment method"
        if split.method == "Credit" and not allow_credit:
            return "Credit cannot be used to repay credit"
        if split.amount <= 0:
            return "Split amounts must be positive"
    if not amounts_match(sum((split.amount for split in splits), Decimal("0")), expected):
        return "Split total must exactly equal the amount due"
    return None


class PaymentReconciler:
    """Settles orders and keeps the customer credit ledger in step."""

    def __init__(self, orders: OrderLedger, customers: CustomerCreditLedger) -> None:
        self.orders = orders
        self.customers = customers

    def _settleable(self, order_id: str) -> Order | None:
        order = self.orders.get(order_id)
        if order is None or not is_editable(order):
            return None
        return order

    def _resolve_customer(self, name: str, phone: str) -> Customer | None:
        customer = self.customers.resolve(name, phone)
        if customer is not None:
            self.customers.record_visit(customer.id)
        return customer

    def settle_payment(
        self,
        order_id: str,
        method: str,
        amount_paid: Decimal | None = None,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> CommandResult:
        order = self._settleable(order_id)
        if order is None:
            return CommandResult.declined("Order not found or already closed")
        if method not in PAYMENT_METHODS:
            return CommandResult.declined(f"Unknown payment method {method}")
        if method == "Split":
            return CommandResult.declined("Split payments need a split allocation")

        total = calculate_order_totals(order).total
        paid = total if amount_paid is None else quantize_money(amount_paid)
        if paid < total:
            return CommandResult.declined("Amount paid is less than the order total")

        name, phone = _customer_identity(order, customer_name, customer_phone)
        if method == "Credit" and not (name or phone):
            raise CustomerRequiredError()

        customer = self._resolve_customer(name, phone)
        change = paid - total
        self.orders.set_payment(
            order_id,
            PaymentInfo(
                method=method,
                amount=total,
                amount_paid=paid,
                change=change,
                customer_name=name or phone or None,
                customer_phone=phone or None,
                timestamp=self.orders.clock(),
            ),
        )
        if method == "Credit" and customer is not None:
            self.customers.post_credit(customer.id, total)
        self.orders.complete_order(order_id)
        logger.info("[PAYMENTS] %s settled by %s, total %s, change %s", order_id, method, total, change)
        return CommandResult.ok(order_id=order_id, customer_id=customer.id if customer else None, change=change)

    def settle_split_payment(
        self,
        order_id: str,
        splits: list[SplitPayment],
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> CommandResult:
        order = self._settleable(order_id)
        if order is None:
            return CommandResult.declined("Order not found or already closed")

        total = calculate_order_totals(order).total
        reason = _validate_splits(splits, total)
        if reason is not None:
            return CommandResult.declined(reason)

        credit_portion = sum((split.amount for split in splits if split.method == "Credit"), Decimal("0"))
        name, phone = _customer_identity(order, customer_name, customer_phone)
        if credit_portion > 0 and not (name or phone):
            raise CustomerRequiredError()

        customer = self._resolve_customer(name, phone)
        self.orders.set_payment(
            order_id,
            PaymentInfo(
                method="Split",
                amount=total,
                amount_paid=quantize_money(total - credit_portion),
                change=Decimal("0"),
                customer_name=name or phone or None,
                customer_phone=phone or None,
                timestamp=self.orders.clock(),
                split_payments=[split.model_copy() for split in splits],
                credit_amount=quantize_money(credit_portion),
            ),
        )
        if customer is not None and credit_portion > 0:
            self.customers.post_credit(customer.id, credit_portion)
        self.orders.complete_order(order_id)
        logger.info("[PAYMENTS] %s settled by split %s", order_id, [(s.method, str(s.amount)) for s in splits])
        return CommandResult.ok(order_id=order_id, customer_id=customer.id if customer else None, change=Decimal("0"))

    def settle_customer_credit(
        self,
        customer_id: str,
        amount: Decimal,
        method: str = "Cash",
        splits: list[SplitPayment] | None = None,
    ) -> CommandResult:
        """Record a customer paying down their credit balance.

        The repayment is filed as a completed receipt order on the customer's
        credit pseudo table, so it is listed with the other receipts.
        """
        customer = self.customers.get(customer_id)
        if customer is None:
            return CommandResult.declined("Customer not found")
        amount = quantize_money(amount)
        if amount <= 0:
            return CommandResult.declined("Enter a valid settlement amount")
        if amount > customer.credit_amount:
            return CommandResult.declined("Settlement amount cannot exceed the outstanding credit")
        if splits:
            reason = _validate_splits(splits, amount, allow_credit=False)
            if reason is not None:
                return CommandResult.declined(reason)
            method = "Split"
        elif method not in PAYMENT_METHODS:
            return CommandResult.declined(f"Unknown payment method {method}")
        elif method in ("Credit", "Split"):
            return CommandResult.declined(f"{method} cannot be used to repay credit")

        receipt = self.orders.create_order(credit_table_id(customer_id))
        self.orders.add_item(
            receipt.id,
            OrderItem(
                menu_item_id=CREDIT_SETTLEMENT_ITEM_ID,
                name="Credit Settlement",
                price=amount,
                quantity=1,
                order_type="BOT",
            ),
        )
        self.orders.set_payment(
            receipt.id,
            PaymentInfo(
                method=method,
                amount=amount,
                amount_paid=amount,
                change=Decimal("0"),
                customer_name=customer.name,
                customer_phone=customer.phone,
                timestamp=self.orders.clock(),
                split_payments=[split.model_copy() for split in splits] if splits else None,
            ),
        )
        self.customers.post_credit(customer_id, -amount)
        self.orders.complete_order(receipt.id)
        logger.info("[PAYMENTS] Credit repayment %s from %s via %s", amount, customer_id, method)
        return CommandResult.ok(order_id=receipt.id, customer_id=customer_id)

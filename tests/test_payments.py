"""Payment reconciliation tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from floor_ledger.schemas.order import OrderItem
from floor_ledger.schemas.payment import SplitPayment
from floor_ledger.services.errors import CustomerRequiredError, PreconditionFailedError
from floor_ledger.services.ledger_service import FloorLedger

NOW = datetime(2026, 3, 14, 20, 0, tzinfo=timezone.utc)


def _ledger_with_bill(total: str = "100.00") -> tuple[FloorLedger, str, str]:
    ledger = FloorLedger(clock=lambda: NOW)
    table = ledger.add_table("Table 1", 4)
    result = ledger.add_item_to_table(
        table.id,
        OrderItem(menu_item_id="thali", name="Thali", price=Decimal(total), quantity=1),
    )
    return ledger, table.id, result.order_id


def test_cash_payment_completes_order_and_returns_change() -> None:
    ledger, _, order_id = _ledger_with_bill()

    result = ledger.settle_payment(order_id, "Cash", amount_paid=Decimal("120"))

    assert result.accepted is True
    assert result.change == Decimal("20.00")
    order = ledger.get_order(order_id)
    assert order.status == "completed"
    assert order.payment.method == "Cash"
    assert order.payment.amount == Decimal("100.00")
    assert order.payment.amount_paid == Decimal("120.00")
    assert order.payment.timestamp == NOW
    assert ledger.state.ongoing_order_ids == []
    assert ledger.state.completed_order_ids == [order_id]


def test_underpayment_is_declined() -> None:
    ledger, _, order_id = _ledger_with_bill()

    result = ledger.settle_payment(order_id, "Cash", amount_paid=Decimal("99.99"))

    assert result.accepted is False
    assert ledger.get_order(order_id).status == "ongoing"


def test_payment_defaults_to_exact_total_and_uses_discount() -> None:
    ledger, _, order_id = _ledger_with_bill()
    ledger.apply_discount(order_id, 10)

    result = ledger.settle_payment(order_id, "Card")

    assert result.change == Decimal("0.00")
    assert ledger.get_order(order_id).payment.amount == Decimal("90.00")


def test_split_payment_must_match_total() -> None:
    ledger, _, order_id = _ledger_with_bill()

    declined = ledger.settle_split_payment(
        order_id,
        [SplitPayment(method="Cash", amount=Decimal("60")), SplitPayment(method="Card", amount=Decimal("39"))],
    )
    assert declined.accepted is False
    assert ledger.get_order(order_id).status == "ongoing"

    accepted = ledger.settle_split_payment(
        order_id,
        [SplitPayment(method="Cash", amount=Decimal("60")), SplitPayment(method="Card", amount=Decimal("40"))],
    )
    assert accepted.accepted is True
    payment = ledger.get_order(order_id).payment
    assert payment.method == "Split"
    assert [(split.method, split.amount) for split in payment.split_payments] == [
        ("Cash", Decimal("60")),
        ("Card", Decimal("40")),
    ]
    assert payment.credit_amount == Decimal("0.00")


def test_split_tolerates_sub_cent_difference() -> None:
    ledger, _, order_id = _ledger_with_bill()

    result = ledger.settle_split_payment(
        order_id,
        [SplitPayment(method="Cash", amount=Decimal("33.333")), SplitPayment(method="Bank", amount=Decimal("66.666"))],
    )

    assert result.accepted is True


def test_credit_without_customer_raises_and_leaves_state_unchanged() -> None:
    ledger, _, order_id = _ledger_with_bill()
    before = ledger.state.model_dump()

    with pytest.raises(CustomerRequiredError):
        ledger.settle_payment(order_id, "Credit")

    assert ledger.state.model_dump() == before
    assert ledger.customers.all_customers() == []
    assert ledger.get_order(order_id).status == "ongoing"


def test_customer_required_is_a_precondition_failure() -> None:
    assert issubclass(CustomerRequiredError, PreconditionFailedError)
    assert "customer" in str(CustomerRequiredError()).lower()


def test_credit_payment_posts_balance_and_visit() -> None:
    ledger, _, order_id = _ledger_with_bill("250.00")

    result = ledger.settle_payment(order_id, "Credit", customer_name="Ram", customer_phone="98111")

    customer = ledger.customers.get(result.customer_id)
    assert customer.name == "Ram"
    assert customer.phone == "98111"
    assert customer.credit_amount == Decimal("250.00")
    assert customer.visit_count == 1
    assert customer.last_visit == NOW


def test_order_assigned_customer_takes_precedence() -> None:
    ledger, _, order_id = _ledger_with_bill()
    ledger.set_order_customer(order_id, "Sita", "98222")

    result = ledger.settle_payment(order_id, "Credit", customer_name="Typed", customer_phone="00000")

    customer = ledger.customers.get(result.customer_id)
    assert (customer.name, customer.phone) == ("Sita", "98222")
    assert ledger.get_order(order_id).payment.customer_phone == "98222"


def test_returning_customer_is_matched_by_phone() -> None:
    ledger, table_id, order_id = _ledger_with_bill()
    first = ledger.settle_payment(order_id, "Credit", customer_name="Ram", customer_phone="98111")
    second_order = ledger.add_item_to_table(
        table_id, OrderItem(menu_item_id="tea", name="Tea", price=Decimal("5"), quantity=2)
    ).order_id

    second = ledger.settle_payment(second_order, "Cash", customer_phone="98111")

    assert second.customer_id == first.customer_id
    customer = ledger.customers.get(first.customer_id)
    assert customer.visit_count == 2
    assert customer.credit_amount == Decimal("100.00")
    assert len(ledger.customers.all_customers()) == 1


def test_split_with_credit_portion_posts_only_that_portion() -> None:
    ledger, _, order_id = _ledger_with_bill()

    result = ledger.settle_split_payment(
        order_id,
        [SplitPayment(method="Cash", amount=Decimal("30")), SplitPayment(method="Credit", amount=Decimal("70"))],
        customer_name="Hari",
    )

    payment = ledger.get_order(order_id).payment
    assert payment.credit_amount == Decimal("70.00")
    assert payment.amount_paid == Decimal("30.00")
    assert ledger.customers.get(result.customer_id).credit_amount == Decimal("70")


def test_split_with_credit_requires_customer() -> None:
    ledger, _, order_id = _ledger_with_bill()

    with pytest.raises(CustomerRequiredError):
        ledger.settle_split_payment(
            order_id,
            [SplitPayment(method="Cash", amount=Decimal("30")), SplitPayment(method="Credit", amount=Decimal("70"))],
        )
    assert ledger.get_order(order_id).status == "ongoing"


def test_settling_merged_order_unmerges_tables() -> None:
    ledger, table_id, order_id = _ledger_with_bill()
    other = ledger.add_table("Table 2", 2)
    merged_order_id = ledger.merge_tables([table_id, other.id], merged_table_id="m1").order_id

    result = ledger.settle_payment(merged_order_id, "Fonepay")

    assert result.accepted is True
    assert ledger.get_table("m1") is None
    assert ledger.get_table(table_id).is_active is True
    assert ledger.get_table(other.id).is_active is True
    assert ledger.get_order(merged_order_id).status == "completed"


def test_closed_orders_cannot_be_settled_twice() -> None:
    ledger, _, order_id = _ledger_with_bill()
    ledger.settle_payment(order_id, "Cash")

    assert ledger.settle_payment(order_id, "Cash").accepted is False
    assert ledger.settle_payment("missing", "Cash").accepted is False
    assert ledger.settle_payment(order_id, "Split").accepted is False

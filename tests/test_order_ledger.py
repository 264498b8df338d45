"""Order ledger behavior tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from floor_ledger.schemas.order import OrderItem
from floor_ledger.services.ledger_service import FloorLedger
from floor_ledger.services.order_status import ORDER_STATUSES, can_transition

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


def _item(menu_item_id: str, price: str, quantity: int = 1, **extra) -> OrderItem:
    return OrderItem(menu_item_id=menu_item_id, name=menu_item_id.title(), price=Decimal(price), quantity=quantity, **extra)


def _ledger_with_order() -> tuple[FloorLedger, str, str]:
    ledger = FloorLedger(clock=lambda: NOW)
    table = ledger.add_table("Table 1", 4)
    result = ledger.create_order(table.id)
    return ledger, table.id, result.order_id


def test_create_order_starts_empty_and_goes_to_front_of_ongoing_index() -> None:
    ledger, _, first_id = _ledger_with_order()
    second_table = ledger.add_table("Table 2", 4)

    second_id = ledger.create_order(second_table.id).order_id

    assert ledger.state.ongoing_order_ids == [second_id, first_id]
    order = ledger.get_order(first_id)
    assert order.status == "ongoing"
    assert order.items == []
    assert order.discount_percentage == 0
    assert order.created_at == NOW


def test_only_one_ongoing_order_per_table() -> None:
    ledger, table_id, order_id = _ledger_with_order()

    result = ledger.create_order(table_id)

    assert result.accepted is False
    assert ledger.open_order(table_id).id == order_id
    assert len(ledger.orders.ongoing_orders()) == 1


def test_add_item_twice_merges_into_one_line() -> None:
    ledger, _, order_id = _ledger_with_order()

    ledger.add_item(order_id, _item("pizza", "12.50", 1, modifiers=["extra cheese"]))
    ledger.add_item(order_id, _item("pizza", "12.50", 2, modifiers=["no olives"]))

    items = ledger.get_order(order_id).items
    assert len(items) == 1
    assert items[0].quantity == 3
    assert items[0].modifiers == ["no olives"]


def test_add_item_to_table_opens_order_on_first_item() -> None:
    ledger = FloorLedger(clock=lambda: NOW)
    table = ledger.add_table("Table 9", 2)

    first = ledger.add_item_to_table(table.id, _item("cola", "2.00", order_type="BOT"))
    second = ledger.add_item_to_table(table.id, _item("cola", "2.00"))

    assert first.order_id == second.order_id
    assert ledger.get_order(first.order_id).items[0].quantity == 2


def test_update_quantity_to_zero_removes_line() -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "10.00", 2))
    ledger.add_item(order_id, _item("cola", "2.00", 1))

    ledger.update_item_quantity(order_id, "pizza", 5)
    assert ledger.get_order(order_id).items[0].quantity == 5

    ledger.update_item_quantity(order_id, "pizza", 0)
    assert [item.menu_item_id for item in ledger.get_order(order_id).items] == ["cola"]

    ledger.remove_item(order_id, "cola")
    assert ledger.get_order(order_id).items == []


def test_invalid_item_is_rejected_on_construction() -> None:
    with pytest.raises(ValidationError):
        _item("pizza", "-1.00")
    with pytest.raises(ValidationError):
        _item("pizza", "1.00", 0)


@pytest.mark.parametrize("percentage", [0, 12.5, 50, 100, 150, -10])
def test_discount_keeps_total_between_zero_and_subtotal(percentage) -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "19.99", 3))

    ledger.apply_discount(order_id, percentage)
    totals = ledger.order_totals(order_id)

    assert Decimal("0") <= totals.total <= totals.subtotal
    assert Decimal("0") <= ledger.get_order(order_id).discount_percentage <= Decimal("100")


def test_totals_apply_discount_without_tax() -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "10.00", 2))
    ledger.add_item(order_id, _item("cola", "2.50", 2))

    ledger.apply_discount(order_id, 10)
    totals = ledger.order_totals(order_id)

    assert totals.subtotal == Decimal("25.00")
    assert totals.discount_amount == Decimal("2.50")
    assert totals.total == Decimal("22.50")


def test_flat_discount_is_converted_once_against_current_subtotal() -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "40.00", 1))

    assert ledger.apply_discount_amount(order_id, Decimal("10")).accepted is True
    assert ledger.get_order(order_id).discount_percentage == Decimal("25")

    ledger.add_item(order_id, _item("pizza", "40.00", 1))
    assert ledger.order_totals(order_id).discount_amount == Decimal("20.00")


def test_flat_discount_rejects_missing_amount_and_empty_orders() -> None:
    ledger, _, order_id = _ledger_with_order()

    assert ledger.apply_discount_amount(order_id, Decimal("5")).accepted is False
    ledger.add_item(order_id, _item("pizza", "40.00", 1))
    assert ledger.apply_discount_amount(order_id, None).accepted is False
    assert ledger.apply_discount_amount(order_id, Decimal("500")).accepted is True
    assert ledger.get_order(order_id).discount_percentage == Decimal("100")


def test_set_order_customer_assigns_and_clears() -> None:
    ledger, _, order_id = _ledger_with_order()

    ledger.set_order_customer(order_id, " Maya ", "98000")
    order = ledger.get_order(order_id)
    assert (order.customer_name, order.customer_phone) == ("Maya", "98000")

    ledger.set_order_customer(order_id)
    assert (order.customer_name, order.customer_phone) == (None, None)


def test_print_delta_counts_only_new_quantities() -> None:
    ledger, _, order_id = _ledger_with_order()
    order = ledger.get_order(order_id)
    ledger.add_item(order_id, _item("pizza", "10.00", 5))
    ledger.add_item(order_id, _item("cola", "2.00", 1))
    order.saved_quantities = {"pizza": 2}

    assert ledger.print_delta(order_id) == {"pizza": 3, "cola": 1}


def test_save_without_printer_snapshots_quantities() -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "10.00", 2))

    result = ledger.save_order(order_id)

    order = ledger.get_order(order_id)
    assert result.success is True
    assert order.is_saved is True
    assert order.saved_quantities == {"pizza": 2}
    assert ledger.print_delta(order_id) == {}

    ledger.add_item(order_id, _item("pizza", "10.00", 1))
    assert ledger.print_delta(order_id) == {"pizza": 1}


def test_cancel_removes_order_from_every_listing() -> None:
    ledger, _, order_id = _ledger_with_order()

    assert ledger.cancel_order(order_id).accepted is True

    assert ledger.get_order(order_id) is None
    assert order_id not in ledger.state.ongoing_order_ids
    assert order_id not in ledger.state.completed_order_ids
    assert ledger.cancel_order(order_id).accepted is False


def test_completed_orders_are_immutable() -> None:
    ledger, _, order_id = _ledger_with_order()
    ledger.add_item(order_id, _item("pizza", "10.00", 1))
    ledger.orders.complete_order(order_id)

    assert ledger.state.completed_order_ids == [order_id]
    assert ledger.add_item(order_id, _item("pizza", "10.00", 1)).accepted is False
    assert ledger.apply_discount(order_id, 50).accepted is False
    assert ledger.cancel_order(order_id).accepted is False
    assert ledger.get_order(order_id).items[0].quantity == 1


def test_status_transitions() -> None:
    assert can_transition("ongoing", "completed") is True
    assert can_transition("ongoing", "cancelled") is True
    assert can_transition("completed", "ongoing") is False
    assert can_transition("cancelled", "completed") is False
    for status in ORDER_STATUSES:
        assert can_transition(status, "ongoing") is False


def test_change_order_table_guards_destination() -> None:
    ledger, table_id, order_id = _ledger_with_order()
    free = ledger.add_table("Free", 4)
    busy = ledger.add_table("Busy", 4)
    reserved = ledger.add_table("Reserved", 4)
    ledger.create_order(busy.id)
    ledger.reserve_table(reserved.id, reserved_by="Ana")

    assert ledger.change_order_table(order_id, busy.id).accepted is False
    assert ledger.change_order_table(order_id, reserved.id).accepted is False
    assert ledger.change_order_table(order_id, "table-missing").accepted is False
    assert ledger.get_order(order_id).table_id == table_id

    assert ledger.change_order_table(order_id, free.id).accepted is True
    assert ledger.get_order(order_id).table_id == free.id

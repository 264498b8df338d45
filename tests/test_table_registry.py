"""Table registry behavior tests."""

from datetime import datetime, timedelta, timezone

from floor_ledger.services.ledger_service import FloorLedger
from floor_ledger.services.table_service import reservation_is_active

NOW = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)


def _ledger() -> FloorLedger:
    return FloorLedger(clock=lambda: NOW)


def test_seed_default_tables_runs_once() -> None:
    ledger = _ledger()

    assert ledger.seed_default_tables() is True
    assert [table.name for table in ledger.tables.all_tables()] == ["Table 1", "Table 2", "Table 3", "Table 4"]
    assert [table.seats for table in ledger.tables.all_tables()] == [4, 4, 6, 6]

    assert ledger.seed_default_tables() is False
    assert len(ledger.tables.all_tables()) == 4


def test_add_table_appends_in_display_order_with_fresh_ids() -> None:
    ledger = _ledger()
    ledger.seed_default_tables()

    patio = ledger.add_table("Patio", 2)
    bar = ledger.add_table("Bar", description="High top")

    ids = [table.id for table in ledger.tables.all_tables()]
    assert ids[-2:] == [patio.id, bar.id]
    assert patio.id == "table-5"
    assert bar.seats == 4
    assert patio.is_active is True


def test_update_table_is_noop_for_unknown_id() -> None:
    ledger = _ledger()
    table = ledger.add_table("Window", 2)

    assert ledger.update_table(table.id, "Window seat", seats=3).accepted is True
    assert ledger.get_table(table.id).name == "Window seat"
    assert ledger.get_table(table.id).seats == 3

    result = ledger.update_table("table-missing", "Ghost")
    assert result.accepted is False
    assert ledger.get_table("table-missing") is None


def test_toggle_table_status_soft_disables() -> None:
    ledger = _ledger()
    table = ledger.add_table("Corner", 4)

    ledger.toggle_table_status(table.id)

    assert ledger.get_table(table.id).is_active is False
    assert table.id not in [t.id for t in ledger.tables.active_tables()]
    assert table.id in [t.id for t in ledger.tables.all_tables()]


def test_reserved_table_is_hidden_until_reservation_expires() -> None:
    ledger = _ledger()
    table = ledger.add_table("Booth", 6)

    ledger.reserve_table(table.id, reserved_by="Ana", reserved_until=NOW + timedelta(hours=1), reserved_note="Birthday")
    assert table.id not in [t.id for t in ledger.tables.visible_tables()]
    assert ledger.get_table(table.id).reserved_at == NOW

    later = NOW + timedelta(hours=2)
    assert table.id in [t.id for t in ledger.tables.visible_tables(now=later)]
    # expiry is derived; the stored flag stays set
    assert ledger.get_table(table.id).is_reserved is True


def test_reservation_without_end_is_indefinite() -> None:
    ledger = _ledger()
    table = ledger.add_table("Booth", 6)
    ledger.reserve_table(table.id, reserved_by="Ana")

    assert reservation_is_active(ledger.get_table(table.id), NOW + timedelta(days=30)) is True

    ledger.unreserve_table(table.id)
    stored = ledger.get_table(table.id)
    assert stored.is_reserved is False
    assert stored.reserved_by is None
    assert stored.reserved_until is None


def test_naive_reservation_end_is_treated_as_utc() -> None:
    ledger = _ledger()
    table = ledger.add_table("Booth", 6)

    ledger.reserve_table(table.id, reserved_until=datetime(2026, 3, 14, 17, 0))

    assert ledger.tables.is_reserved(table.id) is False


def test_remove_table_rejected_while_order_is_ongoing() -> None:
    ledger = _ledger()
    table = ledger.add_table("Terrace", 4)
    ledger.create_order(table.id)

    result = ledger.remove_table(table.id)

    assert result.accepted is False
    assert ledger.get_table(table.id) is not None


def test_remove_table_deletes_idle_table() -> None:
    ledger = _ledger()
    table = ledger.add_table("Terrace", 4)

    assert ledger.remove_table(table.id).accepted is True
    assert ledger.get_table(table.id) is None
    assert table.id not in ledger.state.table_ids
    assert ledger.remove_table(table.id).accepted is False

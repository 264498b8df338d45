"""Table registry: identity, seating, active/merged/reserved status."""

from __future__ import annotations

import logging
from datetime import datetime

from floor_ledger.schemas.state import LedgerState
from floor_ledger.schemas.table import Table
from floor_ledger.utils.time import Clock, ensure_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TABLES: list[tuple[str, int, str]] = [
    ("Table 1", 4, "Standard 4-seater table"),
    ("Table 2", 4, "Standard 4-seater table"),
    ("Table 3", 6, "Large 6-seater table"),
    ("Table 4", 6, "Large 6-seater table"),
]


def reservation_is_active(table: Table, now: datetime) -> bool:
    """Return True while a reservation holds the table.

    Expired reservations stay stored; they only stop counting once
    ``reserved_until`` has passed.
    """
    if not table.is_reserved:
        return False
    return table.reserved_until is None or table.reserved_until > now


class TableRegistry:
    """Owns ``Table`` records inside a ledger state."""

    def __init__(self, state: LedgerState, clock: Clock = utc_now) -> None:
        self.state = state
        self.clock = clock

    def get(self, table_id: str) -> Table | None:
        return self.state.tables_by_id.get(table_id)

    def _allocate_id(self) -> str:
        while f"table-{self.state.next_table_id}" in self.state.tables_by_id:
            self.state.next_table_id += 1
        table_id = f"table-{self.state.next_table_id}"
        self.state.next_table_id += 1
        return table_id

    def add_table(self, name: str, seats: int = 4, description: str | None = None) -> Table:
        table = Table(
            id=self._allocate_id(),
            name=name,
            seats=seats,
            description=description,
            is_active=True,
            created_at=self.clock(),
        )
        self.state.tables_by_id[table.id] = table
        self.state.table_ids.append(table.id)
        logger.info("[TABLES] Added %s (%s, %s seats)", table.id, name, seats)
        return table

    def insert(self, table: Table) -> None:
        """Register a prebuilt table record at the end of display order."""
        self.state.tables_by_id[table.id] = table
        self.state.table_ids.append(table.id)

    def update_table(
        self,
        table_id: str,
        name: str,
        seats: int | None = None,
        description: str | None = None,
    ) -> Table | None:
        table = self.get(table_id)
        if table is None:
            return None
        table.name = name
        if seats is not None:
            table.seats = seats
        if description is not None:
            table.description = description
        return table

    def remove_table(self, table_id: str) -> bool:
        if self.state.tables_by_id.pop(table_id, None) is None:
            return False
        self.state.table_ids = [tid for tid in self.state.table_ids if tid != table_id]
        logger.info("[TABLES] Removed %s", table_id)
        return True

    def toggle_table_status(self, table_id: str) -> Table | None:
        table = self.get(table_id)
        if table is None:
            return None
        table.is_active = not table.is_active
        return table

    def set_active(self, table_id: str, is_active: bool) -> None:
        table = self.get(table_id)
        if table is not None:
            table.is_active = is_active

    def reserve_table(
        self,
        table_id: str,
        reserved_by: str | None = None,
        reserved_until: datetime | None = None,
        reserved_note: str | None = None,
    ) -> Table | None:
        table = self.get(table_id)
        if table is None:
            return None
        table.is_reserved = True
        table.reserved_at = self.clock()
        table.reserved_by = reserved_by
        table.reserved_until = ensure_utc(reserved_until)
        table.reserved_note = reserved_note
        return table

    def unreserve_table(self, table_id: str) -> Table | None:
        table = self.get(table_id)
        if table is None:
            return None
        table.is_reserved = False
        table.reserved_at = None
        table.reserved_by = None
        table.reserved_until = None
        table.reserved_note = None
        return table

    def is_reserved(self, table_id: str) -> bool:
        table = self.get(table_id)
        return table is not None and reservation_is_active(table, self.clock())

    def seed_default_tables(self) -> bool:
        """Create the default floor once, on a registry that has never been seeded."""
        if self.state.is_initialized or self.state.table_ids:
            return False
        for name, seats, description in DEFAULT_TABLES:
            self.add_table(name, seats, description)
        self.state.is_initialized = True
        logger.info("[BOOTSTRAP] Seeded %s default tables", len(DEFAULT_TABLES))
        return True

    def merge_parent_of(self, table_id: str) -> Table | None:
        """Return the live merged table that holds ``table_id`` as a member."""
        for table in self.merged_tables():
            if table_id in (table.merged_tables or []):
                return table
        return None

    def _ordered(self) -> list[Table]:
        return [self.state.tables_by_id[tid] for tid in self.state.table_ids if tid in self.state.tables_by_id]

    def all_tables(self) -> list[Table]:
        """Every table including inactive ones, in display order."""
        return self._ordered()

    def active_tables(self) -> list[Table]:
        return [table for table in self._ordered() if table.is_active]

    def visible_tables(self, now: datetime | None = None) -> list[Table]:
        """Tables a new party can be seated at."""
        current = now or self.clock()
        return [
            table
            for table in self._ordered()
            if table.is_active and not table.is_merged and not reservation_is_active(table, current)
        ]

    def merged_tables(self) -> list[Table]:
        return [table for table in self._ordered() if table.is_merged]

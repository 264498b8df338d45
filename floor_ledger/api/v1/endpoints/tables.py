"""Table registry and merge endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from floor_ledger.api.deps import LedgerCommit, get_ledger
from floor_ledger.schemas.state import CommandResult
from floor_ledger.schemas.table import MergeTablesRequest, ReservationRequest, Table, TableCreate, TableUpdate
from floor_ledger.services.ledger_service import FloorLedger

router: APIRouter = APIRouter()

TableView = Literal["all", "active", "visible", "merged"]


@router.get("", response_model=list[Table])
def list_tables(
    view: TableView = Query(default="all"),
    ledger: FloorLedger = Depends(get_ledger),
) -> list[Table]:
    """Return tables for a management, floor or merge view."""
    with ledger.lock:
        if view == "active":
            tables = ledger.tables.active_tables()
        elif view == "visible":
            tables = ledger.tables.visible_tables()
        elif view == "merged":
            tables = ledger.tables.merged_tables()
        else:
            tables = ledger.tables.all_tables()
        return [table.model_copy(deep=True) for table in tables]


@router.post("", response_model=Table)
def create_table(payload: TableCreate, commit: LedgerCommit = Depends()) -> Table:
    table = commit.apply(commit.ledger.add_table, payload.name, payload.seats, payload.description)
    return table.model_copy(deep=True)


@router.put("/{table_id}", response_model=CommandResult)
def update_table(table_id: str, payload: TableUpdate, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.update_table, table_id, payload.name, payload.seats, payload.description)


@router.delete("/{table_id}", response_model=CommandResult)
def remove_table(table_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.remove_table, table_id)


@router.post("/{table_id}/toggle", response_model=CommandResult)
def toggle_table(table_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.toggle_table_status, table_id)


@router.post("/{table_id}/reservation", response_model=CommandResult)
def reserve_table(table_id: str, payload: ReservationRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(
        commit.ledger.reserve_table,
        table_id,
        payload.reserved_by,
        payload.reserved_until,
        payload.reserved_note,
    )


@router.delete("/{table_id}/reservation", response_model=CommandResult)
def unreserve_table(table_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.unreserve_table, table_id)


@router.post("/merge", response_model=CommandResult)
def merge_tables(payload: MergeTablesRequest, commit: LedgerCommit = Depends()) -> CommandResult:
    """Merge tables and fold their ongoing orders into one."""
    return commit(commit.ledger.merge_tables, payload.table_ids, payload.merged_name, payload.merged_table_id)


@router.post("/{table_id}/unmerge", response_model=CommandResult)
def unmerge_table(table_id: str, commit: LedgerCommit = Depends()) -> CommandResult:
    return commit(commit.ledger.unmerge_tables, table_id)

"""Table records and table API payloads."""

from datetime import datetime

from pydantic import BaseModel, Field


class Table(BaseModel):
    """Physical table or merged virtual table on the floor."""

    id: str
    name: str
    seats: int = Field(default=4, gt=0)
    description: str | None = None
    is_active: bool = True
    created_at: datetime
    is_merged: bool = False
    merged_tables: list[str] | None = None
    merged_table_names: list[str] | None = None
    total_seats: int | None = None
    is_reserved: bool = False
    reserved_at: datetime | None = None
    reserved_until: datetime | None = None
    reserved_by: str | None = None
    reserved_note: str | None = None


class TableCreate(BaseModel):
    """Create a table."""

    name: str = Field(min_length=1)
    seats: int = Field(default=4, gt=0)
    description: str | None = None


class TableUpdate(BaseModel):
    """Update table fields in place."""

    name: str = Field(min_length=1)
    seats: int | None = Field(default=None, gt=0)
    description: str | None = None


class ReservationRequest(BaseModel):
    """Reserve a table, optionally until a point in time."""

    reserved_by: str | None = None
    reserved_until: datetime | None = None
    reserved_note: str | None = None


class MergeTablesRequest(BaseModel):
    """Merge two or more tables into one virtual table."""

    table_ids: list[str]
    merged_name: str | None = None
    merged_table_id: str | None = None

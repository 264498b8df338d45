"""Printing collaborator boundary and the PDF ticket printer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from floor_ledger.core.config import settings
from floor_ledger.schemas.order import Order
from floor_ledger.schemas.table import Table
from floor_ledger.services.ticket_exports import render_ticket_pdf, sanitize_filename
from floor_ledger.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


class PrintResult(BaseModel):
    """Outcome reported by a ticket printer."""

    success: bool
    message: str
    fallback: str | None = None


class TicketPrinter(Protocol):
    """Anything that can take an order's new lines to the kitchen and bar."""

    def print_tickets(self, order: Order, table: Table | None) -> PrintResult: ...


class PdfTicketPrinter:
    """Writes KOT/BOT tickets as PDF files into an output directory."""

    def __init__(self, output_dir: str | Path | None = None, clock: Clock = utc_now) -> None:
        self.output_dir = Path(output_dir or settings.ticket_output_dir)
        self.clock = clock

    def print_tickets(self, order: Order, table: Table | None) -> PrintResult:
        printed_at = self.clock()
        table_label = table.name if table is not None else order.table_id
        filename = f"ticket_{printed_at.strftime('%Y%m%d_%H%M%S')}_{sanitize_filename(table_label)}_{order.id[-6:]}.pdf"
        path = self.output_dir / filename
        try:
            payload = render_ticket_pdf(order, table, printed_at)
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            logger.warning("[PRINT] Could not write ticket for %s: %s", order.id, exc)
            return PrintResult(success=False, message=f"Could not write ticket: {exc}", fallback="reprint")
        logger.info("[PRINT] Wrote %s", path)
        return PrintResult(success=True, message=f"Ticket saved to {path}")

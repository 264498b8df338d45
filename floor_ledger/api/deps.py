"""Shared dependencies for ledger API routes."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from floor_ledger.db.session import get_db
from floor_ledger.schemas.state import CommandResult
from floor_ledger.services.ledger_service import FloorLedger
from floor_ledger.services.persistence_service import save_ledger_state
from floor_ledger.services.printing import PdfTicketPrinter, PrintResult, TicketPrinter

logger = logging.getLogger(__name__)


def get_ledger(request: Request) -> FloorLedger:
    """Return the ledger instance owned by the running application."""
    return request.app.state.ledger


def get_ticket_printer() -> TicketPrinter:
    return PdfTicketPrinter()


def _changed_state(outcome: Any) -> bool:
    if isinstance(outcome, CommandResult):
        return outcome.accepted
    if isinstance(outcome, PrintResult):
        return outcome.success
    return True


class LedgerCommit:
    """Runs one ledger command and persists it; turns declines into 400s.

    The ledger lock is held across the command and the save, and a failed
    save rolls the in-memory state back to what is stored.
    """

    def __init__(self, ledger: FloorLedger = Depends(get_ledger), db: Session = Depends(get_db)) -> None:
        self.ledger = ledger
        self.db = db

    def apply(self, command: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        with self.ledger.lock:
            try:
                with self.ledger.transaction():
                    outcome = command(*args, **kwargs)
                    if _changed_state(outcome):
                        save_ledger_state(self.db, self.ledger.state)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("[PERSIST] Could not store ledger state; command rolled back.")
                raise
        return outcome

    def __call__(self, command: Callable[..., CommandResult], *args: Any, **kwargs: Any) -> CommandResult:
        result = self.apply(command, *args, **kwargs)
        if not result.accepted:
            raise HTTPException(status_code=400, detail=result.reason)
        return result

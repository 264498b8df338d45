"""Persistence collaborator: saves and restores the whole ledger state tree."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from floor_ledger.core.config import settings
from floor_ledger.models.ledger_state import LedgerStateRecord
from floor_ledger.services.errors import LedgerStateUnreadableError
from floor_ledger.schemas.state import LedgerState

logger = logging.getLogger(__name__)


def load_ledger_state(db: Session, key: str | None = None) -> LedgerState | None:
    """Read the state stored under ``key``; None when nothing is stored yet.

    A stored payload that does not parse raises ``LedgerStateUnreadableError``
    and is left untouched.
    """
    state_key = key or settings.state_key
    record: LedgerStateRecord | None = db.get(LedgerStateRecord, state_key)
    if record is None:
        return None
    try:
        return LedgerState.model_validate_json(record.payload)
    except ValidationError as exc:
        logger.error("[PERSIST] Stored state under %s is unreadable: %s", state_key, exc)
        raise LedgerStateUnreadableError(f"Stored ledger state under {state_key!r} is unreadable") from exc


def save_ledger_state(db: Session, state: LedgerState, key: str | None = None) -> None:
    """Write the full state tree under ``key``, replacing what was there."""
    state_key = key or settings.state_key
    payload: str = state.model_dump_json()
    record: LedgerStateRecord | None = db.get(LedgerStateRecord, state_key)
    if record is None:
        db.add(LedgerStateRecord(key=state_key, payload=payload))
    else:
        record.payload = payload
    db.commit()

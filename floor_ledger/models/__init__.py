"""Application models package."""

from floor_ledger.models.ledger_state import LedgerStateRecord

__all__ = ["LedgerStateRecord"]

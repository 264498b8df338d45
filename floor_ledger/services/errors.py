"""Ledger error types."""


class LedgerError(Exception):
    """Base class for ledger failures that callers must handle."""


class PreconditionFailedError(LedgerError):
    """Raised when a command cannot run until the caller fixes its input."""


class CustomerRequiredError(PreconditionFailedError):
    """Raised when a Credit portion is settled without a resolvable customer."""

    def __init__(self, message: str = "Enter customer name or phone to assign credit.") -> None:
        super().__init__(message)


class LedgerStateUnreadableError(LedgerError):
    """Raised when the stored state exists but cannot be parsed.

    Startup stops instead of seeding over the stored row, so the payload can
    be inspected and repaired.
    """

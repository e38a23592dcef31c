class LedgerError(Exception):
    """Base exception for expected domain errors."""
    kind = "error"


class NotFoundError(LedgerError):
    """Member, loan, request or ledger entry could not be resolved."""
    kind = "not_found"


class ConflictError(LedgerError):
    """Operation clashes with an existing record."""
    kind = "conflict"


class InvalidStateError(LedgerError):
    """Record is not in a state that allows the operation."""
    kind = "invalid_state"


class ValidationError(LedgerError):
    """Input amounts or fields are not acceptable."""
    kind = "validation"

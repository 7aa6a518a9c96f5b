"""Error taxonomy for the payment and ledger engine."""


class LedgerError(Exception):
    """Base class for every error raised by the engine."""
    pass


class BatchValidationError(LedgerError):
    """The whole batch is rejected before any item is touched."""
    pass


class InvalidExchangeRate(BatchValidationError):
    """A cross-currency conversion was requested without a rate > 0."""
    pass


class CounterpartyNotFound(LedgerError):
    """The customer or operator named by the batch does not exist."""

    def __init__(self, counterparty_id: str):
        self.counterparty_id = counterparty_id
        super().__init__(f"Counterparty not found: {counterparty_id}")


class ItemValidationError(LedgerError):
    """A single payment item is invalid; the batch continues."""
    pass


class PersistenceError(LedgerError):
    """A repository read or write failed."""
    pass


class SoftDegradeError(LedgerError):
    """A secondary bookkeeping write was skipped or failed."""
    pass

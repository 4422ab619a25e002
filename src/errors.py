from typing import Optional


class LedgerError(Exception):
    """Base class for errors that abort a ledger run."""


class AccountLockedError(LedgerError):
    def __init__(self, client_id: int):
        super().__init__(f"Client account {client_id} is locked")
        self.client_id = client_id


class EntryDecodeError(LedgerError):
    """Raised when an input row cannot be turned into a ledger entry."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class MissingAmountError(EntryDecodeError):
    pass


class ConfigError(LedgerError):
    pass

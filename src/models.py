from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional


class EntryType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (EntryType.DEPOSIT, EntryType.WITHDRAWAL)


class DisputeState(Enum):
    EXECUTED = "executed"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"

    @property
    def is_terminal(self) -> bool:
        return self in (DisputeState.RESOLVED, DisputeState.CHARGED_BACK)


@dataclass(frozen=True)
class LedgerEntry:
    entry_type: EntryType
    client_id: int
    tx_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        # dispute/resolve/chargeback never carry an amount, even if the source row had one
        if not self.entry_type.carries_amount and self.amount is not None:
            object.__setattr__(self, "amount", None)

    @classmethod
    def deposit(cls, client_id: int, tx_id: int, amount: Decimal) -> "LedgerEntry":
        return cls(EntryType.DEPOSIT, client_id, tx_id, amount)

    @classmethod
    def withdrawal(cls, client_id: int, tx_id: int, amount: Decimal) -> "LedgerEntry":
        return cls(EntryType.WITHDRAWAL, client_id, tx_id, amount)

    @classmethod
    def dispute(cls, client_id: int, tx_id: int) -> "LedgerEntry":
        return cls(EntryType.DISPUTE, client_id, tx_id)

    @classmethod
    def resolve(cls, client_id: int, tx_id: int) -> "LedgerEntry":
        return cls(EntryType.RESOLVE, client_id, tx_id)

    @classmethod
    def chargeback(cls, client_id: int, tx_id: int) -> "LedgerEntry":
        return cls(EntryType.CHARGEBACK, client_id, tx_id)

    def __repr__(self) -> str:
        return f"LedgerEntry({self.entry_type.value}, client={self.client_id}, tx={self.tx_id}, amount={self.amount})"


@dataclass
class LedgerRecord:
    """A deposit or withdrawal kept for later dispute lookups."""

    entry: LedgerEntry
    state: DisputeState = DisputeState.EXECUTED

    @property
    def amount(self) -> Decimal:
        return self.entry.amount

    @property
    def is_deposit(self) -> bool:
        return self.entry.entry_type == EntryType.DEPOSIT


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    records: Dict[int, LedgerRecord] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount


class ProcessingStats:
    """Counters for a single run."""

    def __init__(self):
        self.applied = 0
        self.rejected = 0

    def record_applied(self):
        self.applied += 1

    def record_rejected(self):
        self.rejected += 1

import logging
from typing import Optional

from account_store import AccountStore
from errors import AccountLockedError
from models import LedgerEntry, EntryType, ClientAccount, LedgerRecord, DisputeState

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies ledger entries to client accounts, one at a time, in arrival order.

    Only a locked account is an error. Entries that reference an unknown
    transaction, a record in the wrong dispute state, a withdrawal, or that
    would overdraw the account are dropped without touching any balance.
    """

    def __init__(self, store: AccountStore):
        self._store = store

    @property
    def store(self) -> AccountStore:
        return self._store

    def apply(self, entry: LedgerEntry) -> None:
        """
        Apply a single entry.

        Raises:
            AccountLockedError: the client's account was locked by an earlier chargeback.
        """
        account = self._store.get_or_create_account(entry.client_id)

        if account.locked:
            raise AccountLockedError(entry.client_id)

        match entry.entry_type:
            case EntryType.DEPOSIT:
                self._handle_deposit(account, entry)
            case EntryType.WITHDRAWAL:
                self._handle_withdrawal(account, entry)
            case EntryType.DISPUTE:
                self._handle_dispute(account, entry)
            case EntryType.RESOLVE:
                self._handle_resolve(account, entry)
            case EntryType.CHARGEBACK:
                self._handle_chargeback(account, entry)
            case _:
                raise TypeError(f"Unhandled entry type: {entry.entry_type!r}")

    def _handle_deposit(self, account: ClientAccount, entry: LedgerEntry) -> None:
        if entry.tx_id in account.records:
            logger.debug(f"Deposit tx {entry.tx_id}: replaces an earlier record with the same id")

        account.credit(entry.amount)
        account.records[entry.tx_id] = LedgerRecord(entry)

    def _handle_withdrawal(self, account: ClientAccount, entry: LedgerEntry) -> None:
        if account.available < entry.amount:
            logger.debug(f"Withdrawal tx {entry.tx_id}: insufficient funds ({account.available} < {entry.amount})")
            return

        account.debit(entry.amount)
        account.records[entry.tx_id] = LedgerRecord(entry)

    def _handle_dispute(self, account: ClientAccount, entry: LedgerEntry) -> None:
        record = self._find_deposit(account, entry, DisputeState.EXECUTED)
        if record is None:
            return

        account.hold(record.amount)
        record.state = DisputeState.DISPUTED

    def _handle_resolve(self, account: ClientAccount, entry: LedgerEntry) -> None:
        record = self._find_deposit(account, entry, DisputeState.DISPUTED)
        if record is None:
            return

        account.release_hold(record.amount)
        record.state = DisputeState.RESOLVED

    def _handle_chargeback(self, account: ClientAccount, entry: LedgerEntry) -> None:
        record = self._find_deposit(account, entry, DisputeState.DISPUTED)
        if record is None:
            return

        account.remove_held(record.amount)
        record.state = DisputeState.CHARGED_BACK
        account.locked = True
        logger.info(f"Client {account.client_id}: locked by chargeback of tx {entry.tx_id}")

    def _find_deposit(
        self, account: ClientAccount, entry: LedgerEntry, expected: DisputeState
    ) -> Optional[LedgerRecord]:
        """Look up the deposit an entry refers to, if it is in the expected dispute state."""
        kind = entry.entry_type.value.capitalize()
        record = account.records.get(entry.tx_id)

        if record is None:
            logger.debug(f"{kind} for tx {entry.tx_id}: no such transaction for client {account.client_id}")
            return None

        if not record.is_deposit:
            logger.debug(f"{kind} for tx {entry.tx_id}: only deposits can be disputed")
            return None

        if record.state != expected:
            logger.debug(f"{kind} for tx {entry.tx_id}: transaction is {record.state.value}, expected {expected.value}")
            return None

        return record

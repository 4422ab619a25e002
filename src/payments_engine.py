import logging
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, TextIO

from account_store import AccountStore
from csv_reader import read_entries
from csv_writer import write_accounts
from errors import AccountLockedError, ConfigError
from ledger_engine import LedgerEngine
from models import LedgerEntry, ClientAccount, ProcessingStats

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Input and output streams for a single run."""

    reader: TextIO
    writer: TextIO

    @classmethod
    def from_args(cls, argv: List[str]) -> "Config":
        """Build a config from ``[program, input_path]``; output goes to stdout."""
        if len(argv) != 2:
            raise ConfigError("expected exactly one argument: the path to the transactions CSV")

        filepath = argv[1]
        try:
            reader = open(filepath, "r", encoding="utf-8", newline="")
        except OSError as e:
            raise ConfigError(f"cannot open {filepath}: {e.strerror}") from e

        return cls(reader=reader, writer=sys.stdout)


class PaymentsEngine:
    """
    Runs a ledger replay: pulls entries from a CSV source one at a time,
    applies each before reading the next, and keeps the resulting accounts.

    With ``fail_on_locked`` (the default) an entry for a locked account aborts
    the run. Otherwise the entry is logged, counted as rejected and skipped.
    """

    def __init__(self, fail_on_locked: bool = True):
        self._fail_on_locked = fail_on_locked
        self._store = AccountStore()
        self._engine = LedgerEngine(self._store)
        self._stats = ProcessingStats()

    @property
    def store(self) -> AccountStore:
        return self._store

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process a CSV text stream and return final account states."""
        return self.process_entries(read_entries(stream))

    def process_entries(self, entries: Iterable[LedgerEntry]) -> Dict[int, ClientAccount]:
        logger.info("Starting ledger replay")

        for entry in entries:
            try:
                self._engine.apply(entry)
            except AccountLockedError:
                if self._fail_on_locked:
                    raise
                self._stats.record_rejected()
                logger.warning(f"Rejected {entry}: account is locked")
                continue
            self._stats.record_applied()

        logger.info(
            f"Ledger replay complete. Applied: {self._stats.applied}, "
            f"Rejected: {self._stats.rejected}, Accounts: {len(self._store)}"
        )
        return self._store.get_all_accounts()

    def write_snapshot(self, stream: TextIO) -> int:
        return write_accounts(self._store.snapshot(), stream)


def run(config: Config, engine: Optional[PaymentsEngine] = None) -> TextIO:
    """Replay ``config.reader`` and write the account snapshot to ``config.writer``."""
    engine = engine or PaymentsEngine()
    engine.process_stream(config.reader)
    engine.write_snapshot(config.writer)
    return config.writer

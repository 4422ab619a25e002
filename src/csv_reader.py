import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from errors import EntryDecodeError, MissingAmountError
from models import LedgerEntry, EntryType

REQUIRED_COLUMNS = ("type", "client", "tx")

MAX_CLIENT_ID = 2**16 - 1
MAX_TX_ID = 2**32 - 1


def read_entries(stream: TextIO) -> Iterator[LedgerEntry]:
    """
    Lazily decode ledger entries from a CSV stream with a
    ``type,client,tx,amount`` header.

    Whitespace around headers and values is ignored and rows may be shorter
    or longer than the header. The first malformed row raises
    EntryDecodeError; nothing after it is read.
    """
    reader = csv.DictReader(stream)
    try:
        if reader.fieldnames is None:
            return

        reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise EntryDecodeError(f"missing column(s) in header: {', '.join(missing)}", line=1)

        for row in reader:
            yield parse_row(row, line=reader.line_num)
    except (csv.Error, UnicodeDecodeError) as e:
        raise EntryDecodeError(str(e), line=reader.line_num) from e


def parse_row(row: Dict[Optional[str], object], line: Optional[int] = None) -> LedgerEntry:
    """Parse one CSV row into a LedgerEntry."""
    normalized = {
        key: value.strip()
        for key, value in row.items()
        if key is not None and isinstance(value, str)
    }

    type_str = normalized.get("type", "").lower()
    try:
        entry_type = EntryType(type_str)
    except ValueError:
        raise EntryDecodeError(f"unknown transaction type {type_str!r}", line=line) from None

    client_id = _parse_int(normalized, "client", MAX_CLIENT_ID, line)
    tx_id = _parse_int(normalized, "tx", MAX_TX_ID, line)

    amount = None
    if entry_type.carries_amount:
        amount_str = normalized.get("amount", "")
        if not amount_str:
            raise MissingAmountError(f"missing amount for {entry_type.value}", line=line)
        amount = _parse_amount(amount_str, line)

    return LedgerEntry(
        entry_type=entry_type,
        client_id=client_id,
        tx_id=tx_id,
        amount=amount,
    )


def _parse_int(normalized: Dict[str, str], column: str, maximum: int, line: Optional[int]) -> int:
    value_str = normalized.get(column, "")
    try:
        value = int(value_str)
    except ValueError:
        raise EntryDecodeError(f"invalid {column} {value_str!r}", line=line) from None

    if not 0 <= value <= maximum:
        raise EntryDecodeError(f"{column} {value} out of range 0..{maximum}", line=line)
    return value


def _parse_amount(amount_str: str, line: Optional[int]) -> Decimal:
    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise EntryDecodeError(f"invalid amount {amount_str!r}", line=line) from None

    if not amount.is_finite() or amount < 0:
        raise EntryDecodeError(f"amount must be a non-negative number, got {amount_str!r}", line=line)
    return amount

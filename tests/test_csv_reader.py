import sys
import os
import io
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from csv_reader import read_entries, parse_row
from errors import EntryDecodeError, MissingAmountError
from models import LedgerEntry, EntryType


def decode(*lines):
    return list(read_entries(io.StringIO("\n".join(lines))))


class TestReadEntries:
    def test_all_entry_types(self):
        entries = decode(
            "type,client,tx,amount",
            "deposit,1,1,1.5",
            "withdrawal,1,2,0.5",
            "dispute,1,1,",
            "resolve,1,1,",
            "chargeback,1,1,",
        )

        assert entries == [
            LedgerEntry.deposit(1, 1, Decimal("1.5")),
            LedgerEntry.withdrawal(1, 2, Decimal("0.5")),
            LedgerEntry.dispute(1, 1),
            LedgerEntry.resolve(1, 1),
            LedgerEntry.chargeback(1, 1),
        ]

    def test_whitespace_is_ignored(self):
        entries = decode(
            "type, client, tx, amount",
            " deposit,  1,  1, 1.0 ",
        )
        assert entries == [LedgerEntry.deposit(1, 1, Decimal("1.0"))]

    def test_short_rows_are_accepted(self):
        entries = decode(
            "type,client,tx,amount",
            "dispute,1,1",
        )
        assert entries == [LedgerEntry.dispute(1, 1)]

    def test_extra_fields_are_ignored(self):
        entries = decode(
            "type,client,tx,amount",
            "deposit,1,1,2.0,unexpected",
        )
        assert entries == [LedgerEntry.deposit(1, 1, Decimal("2.0"))]

    def test_amount_ignored_for_dispute(self):
        entries = decode(
            "type,client,tx,amount",
            "dispute,1,1,3.0",
        )
        assert entries[0].amount is None

    def test_empty_input(self):
        assert decode("") == []

    def test_header_only(self):
        assert decode("type,client,tx,amount") == []

    def test_invalid_utf8_is_decode_error(self, tmp_path):
        csv_file = tmp_path / "bad.csv"
        csv_file.write_bytes(b"type,client,tx,amount\ndeposit,1,1,1.0\xff\n")

        with open(csv_file, "r", encoding="utf-8", newline="") as f:
            with pytest.raises(EntryDecodeError):
                list(read_entries(f))

    def test_is_lazy(self):
        entries = read_entries(io.StringIO("type,client,tx,amount\ndeposit,1,1,1.0\nbogus,1,2,\n"))
        assert next(entries) == LedgerEntry.deposit(1, 1, Decimal("1.0"))
        with pytest.raises(EntryDecodeError):
            next(entries)

    @pytest.mark.parametrize("entry_type", ["deposit", "withdrawal"])
    def test_missing_amount(self, entry_type):
        with pytest.raises(MissingAmountError) as excinfo:
            decode("type,client,tx,amount", f"{entry_type},1,1,")
        assert excinfo.value.line == 2

    @pytest.mark.parametrize("row", [
        "transfer,1,1,1.0",
        "deposit,x,1,1.0",
        "deposit,1,x,1.0",
        "deposit,65536,1,1.0",
        "deposit,-1,1,1.0",
        "deposit,1,4294967296,1.0",
        "deposit,1,1,abc",
        "deposit,1,1,-1.0",
        "deposit,1,1,NaN",
    ])
    def test_malformed_rows(self, row):
        with pytest.raises(EntryDecodeError):
            decode("type,client,tx,amount", row)

    def test_bounds_are_inclusive(self):
        entries = decode("type,client,tx,amount", "deposit,65535,4294967295,0")
        assert entries == [LedgerEntry.deposit(65535, 4294967295, Decimal("0"))]

    def test_missing_header_column(self):
        with pytest.raises(EntryDecodeError) as excinfo:
            decode("type,client,amount", "deposit,1,1.0")
        assert "tx" in str(excinfo.value)


class TestParseRow:
    def test_type_is_case_insensitive(self):
        entry = parse_row({"type": "Deposit", "client": "1", "tx": "2", "amount": "3"})
        assert entry.entry_type == EntryType.DEPOSIT

    def test_error_reports_line(self):
        with pytest.raises(EntryDecodeError) as excinfo:
            parse_row({"type": "deposit", "client": "1", "tx": "oops", "amount": "1"}, line=12)
        assert str(excinfo.value).startswith("line 12:")

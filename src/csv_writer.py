import csv
from decimal import Decimal, ROUND_DOWN, localcontext
from typing import Iterable, TextIO

from models import ClientAccount

HEADER = ("client", "available", "held", "total", "locked")

DECIMAL_PLACES = 4


def truncate_decimal(value: Decimal, places: int = DECIMAL_PLACES) -> Decimal:
    """Cut a decimal to ``places`` fractional digits, rounding toward zero."""
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the kept fraction
        ctx.prec = max(ctx.prec, value.adjusted() + places + 1)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)


def format_amount(value: Decimal) -> str:
    """Format a balance truncated to 4 places, without trailing zeros but with at least one decimal."""
    truncated = truncate_decimal(value)
    if truncated.is_zero():
        return "0.0"

    text = f"{truncated:f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


def account_row(account: ClientAccount) -> list:
    # total is derived from full precision balances before any truncation
    return [
        account.client_id,
        format_amount(account.available),
        format_amount(account.held),
        format_amount(account.total),
        str(account.locked).lower(),
    ]


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> int:
    """Write the account snapshot as CSV. Returns the number of accounts written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)

    count = 0
    for account in accounts:
        writer.writerow(account_row(account))
        count += 1
    return count

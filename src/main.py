import logging
import os
import sys
from typing import List, Optional

from errors import ConfigError, LedgerError
from payments_engine import Config, run

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    argv = sys.argv if argv is None else argv

    try:
        config = Config.from_args(argv)
    except ConfigError as e:
        print(f"Problem parsing arguments: {e}", file=sys.stderr)
        print("Usage: payments-engine <transactions.csv>", file=sys.stderr)
        return 1

    try:
        with config.reader:
            run(config)
    except LedgerError as e:
        print(f"Application error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

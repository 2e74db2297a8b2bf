"""Create (or recreate) the ledger tables for the configured database."""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import SQLAlchemyError

from prompt_ledger.core.settings import settings
from prompt_ledger.db.session import create_tables, drop_tables


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the ledger tables")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop all ledger tables before creating them.",
    )
    args = parser.parse_args(argv)

    try:
        if args.drop_tables:
            drop_tables()
            print("[init_db] dropped all ledger tables")
        create_tables()
    except SQLAlchemyError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        return 1
    print(f"[init_db] tables ready on {settings.effective_database_url.split('@')[-1]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# src/prompt_ledger/scripts/tokens.py
"""
Mint bearer tokens for ledger callers.

Operators and session keepers use this to obtain a token for their
configured address; any other address yields an ordinary caller token.
"""

from __future__ import annotations

import argparse
import sys

from prompt_ledger.core.security import create_access_token
from prompt_ledger.core.settings import settings

ROLE_ADDRESSES = {
    "operator": lambda: settings.operator_address,
    "session-keeper": lambda: settings.session_keeper_address,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mint a bearer token for a ledger caller")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--address", help="Caller address (0x + 40 hex digits)")
    target.add_argument(
        "--role",
        choices=sorted(ROLE_ADDRESSES),
        help="Mint a token for a configured privileged identity",
    )
    parser.add_argument(
        "--expires-minutes",
        type=int,
        default=None,
        help="Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    args = parser.parse_args(argv)

    address = args.address if args.address else ROLE_ADDRESSES[args.role]()
    try:
        token = create_access_token(address, expires_minutes=args.expires_minutes)
    except ValueError as exc:
        print(f"[tokens] ERROR: {exc}", file=sys.stderr)
        return 1
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())

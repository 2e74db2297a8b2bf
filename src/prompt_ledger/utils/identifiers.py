"""Parsing and formatting helpers for ledger identifiers and caller addresses.

Identifiers are 32-byte opaque values (request ids, session ids, hashes).
Addresses are 20-byte caller identities rendered as lowercase ``0x`` hex.
Both reserve an all-zero value as the "absent" sentinel.
"""

from __future__ import annotations

import binascii
from typing import Final

IDENTIFIER_BYTES: Final[int] = 32
ADDRESS_BYTES: Final[int] = 20

ZERO_ID: Final[bytes] = bytes(IDENTIFIER_BYTES)
ZERO_ADDRESS: Final[str] = "0x" + "00" * ADDRESS_BYTES


def _strip_prefix(value: str) -> str:
    value = value.strip()
    if value[:2].lower() == "0x":
        return value[2:]
    return value


def parse_identifier(value: str) -> bytes:
    """Decode a 64-digit hex string (optionally ``0x``-prefixed) into 32 bytes.

    Raises:
        ValueError: If the value is not valid hex of the expected width.
    """
    digits = _strip_prefix(value)
    if len(digits) != IDENTIFIER_BYTES * 2:
        raise ValueError(f"Identifier must be {IDENTIFIER_BYTES * 2} hex digits")
    try:
        return binascii.unhexlify(digits)
    except binascii.Error as err:
        raise ValueError("Identifier is not valid hex") from err


def format_identifier(value: bytes | None) -> str:
    """Render a 32-byte identifier as ``0x``-prefixed lowercase hex."""
    return "0x" + (value or ZERO_ID).hex()


def is_zero(value: bytes) -> bool:
    """Return True when the identifier is the reserved zero sentinel."""
    return value == ZERO_ID


def normalize_address(value: str) -> str:
    """Return the canonical ``0x``-prefixed lowercase form of an address.

    Raises:
        ValueError: If the value is not 40 hex digits.
    """
    digits = _strip_prefix(value)
    if len(digits) != ADDRESS_BYTES * 2:
        raise ValueError(f"Address must be {ADDRESS_BYTES * 2} hex digits")
    try:
        binascii.unhexlify(digits)
    except binascii.Error as err:
        raise ValueError("Address is not valid hex") from err
    return "0x" + digits.lower()

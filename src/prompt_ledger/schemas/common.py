"""Shared Pydantic types for ledger identifiers."""
from __future__ import annotations

from typing import Annotated

from pydantic import PlainSerializer, PlainValidator, WithJsonSchema

from prompt_ledger.utils.identifiers import format_identifier, parse_identifier


def _validate_identifier(value: object) -> bytes:
    if isinstance(value, bytes | bytearray):
        if len(value) != 32:
            raise ValueError("Identifier must be 32 bytes")
        return bytes(value)
    if not isinstance(value, str):
        raise ValueError("Identifier must be a hex string")
    return parse_identifier(value)


Identifier = Annotated[
    bytes,
    PlainValidator(_validate_identifier),
    PlainSerializer(format_identifier, return_type=str),
    WithJsonSchema(
        {
            "type": "string",
            "pattern": "^(0x)?[0-9a-fA-F]{64}$",
            "description": "32-byte identifier as hex",
        }
    ),
]

"""Prompt Ledger: an append-only, access-controlled prompt/response ledger."""

__version__ = "0.1.0"

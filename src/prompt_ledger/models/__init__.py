# src/prompt_ledger/models/__init__.py
"""SQLAlchemy models for the Prompt Ledger application."""

from .event import LedgerEvent
from .ledger_state import LedgerState
from .prompt import PromptRecord, ResponseRecord
from .session import LedgerSession, SessionRequest

__all__ = [
    "LedgerEvent",
    "LedgerState",
    "PromptRecord", "ResponseRecord",
    "LedgerSession", "SessionRequest",
]

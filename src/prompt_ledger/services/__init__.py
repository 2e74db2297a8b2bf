# src/prompt_ledger/services/__init__.py
"""Business logic services for the Prompt Ledger application."""

from .errors import LedgerError
from .events import EventBus, get_event_bus
from .ledger import Ledger, build_ledger

__all__ = [
    "EventBus",
    "Ledger",
    "LedgerError",
    "build_ledger",
    "get_event_bus",
]

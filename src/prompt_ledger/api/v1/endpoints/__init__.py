# src/prompt_ledger/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .ledger import router as ledger_router
from .sessions import router as sessions_router
from .system import router as system_router

__all__ = [
    "ledger_router",
    "sessions_router",
    "system_router",
]

# src/prompt_ledger/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import ledger_router, sessions_router, system_router

__all__ = [
    "ledger_router",
    "sessions_router",
    "system_router",
]

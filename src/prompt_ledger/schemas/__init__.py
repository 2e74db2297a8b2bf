# src/prompt_ledger/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import Identifier
from .ledger import (
    CountResponse,
    IndexedIdentifier,
    PromptResponse,
    PromptSubmit,
    ResponseBatch,
    ResponseBatchResult,
    ResponseSet,
    ResponseView,
)
from .session import SessionAppend, SessionCreate, SessionRequestResponse, SessionResponse

__all__ = [
    "Identifier",
    "CountResponse", "IndexedIdentifier",
    "PromptResponse", "PromptSubmit",
    "ResponseBatch", "ResponseBatchResult", "ResponseSet", "ResponseView",
    "SessionAppend", "SessionCreate", "SessionRequestResponse", "SessionResponse",
]

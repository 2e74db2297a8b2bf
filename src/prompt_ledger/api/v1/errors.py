"""Translate ledger rejections into HTTP responses."""

from __future__ import annotations

from typing import Final

from fastapi import Request, status
from fastapi.responses import JSONResponse

from prompt_ledger.services.errors import LedgerError

STATUS_BY_CODE: Final[dict[str, int]] = {
    "zero_identifier": status.HTTP_400_BAD_REQUEST,
    "invalid_length": status.HTTP_400_BAD_REQUEST,
    "invalid_identity": status.HTTP_400_BAD_REQUEST,
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "invalid_session": status.HTTP_404_NOT_FOUND,
    "invalid_index": status.HTTP_404_NOT_FOUND,
    "already_submitted": status.HTTP_409_CONFLICT,
    "response_already_set": status.HTTP_409_CONFLICT,
    "session_exists": status.HTTP_409_CONFLICT,
    "reentrant_call": status.HTTP_409_CONFLICT,
    "paused": status.HTTP_423_LOCKED,
    "capacity_exceeded": status.HTTP_507_INSUFFICIENT_STORAGE,
}


async def ledger_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a ``LedgerError`` as ``{"detail": ..., "error": <code>}``."""
    code = getattr(exc, "code", LedgerError.code)
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST),
        content={"detail": str(exc), "error": code},
    )

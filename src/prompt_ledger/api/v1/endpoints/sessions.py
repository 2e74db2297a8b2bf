"""Session endpoints for the Prompt Ledger API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from prompt_ledger.api.v1.dependencies import CallerDep, LedgerDep, path_identifier
from prompt_ledger.models import LedgerSession
from prompt_ledger.schemas.ledger import CountResponse, IndexedIdentifier
from prompt_ledger.schemas.session import (
    SessionAppend,
    SessionCreate,
    SessionRequestResponse,
    SessionResponse,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    caller: CallerDep,
    ledger: LedgerDep,
) -> LedgerSession:
    """Create an empty session; session keeper only."""
    return ledger.create_session(caller, payload.session_id)


@router.get("/count", response_model=CountResponse)
async def session_count(ledger: LedgerDep) -> CountResponse:
    return CountResponse(count=ledger.session_count())


@router.get("/{index}", response_model=IndexedIdentifier)
async def get_session_at(index: int, ledger: LedgerDep) -> IndexedIdentifier:
    """Return the session id at ``index`` in creation order."""
    return IndexedIdentifier(index=index, id=ledger.get_session_at(index))


@router.post(
    "/{session_id}/requests",
    response_model=SessionRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_session_request(
    session_id: str,
    payload: SessionAppend,
    caller: CallerDep,
    ledger: LedgerDep,
) -> SessionRequestResponse:
    """Append a request id to an existing session; session keeper only."""
    key = path_identifier(session_id)
    entry = ledger.append_session_request(caller, key, payload.request_id)
    return SessionRequestResponse.model_validate(entry)


@router.get("/{session_id}/requests/count", response_model=CountResponse)
async def get_session_request_count(session_id: str, ledger: LedgerDep) -> CountResponse:
    return CountResponse(count=ledger.get_session_request_count(path_identifier(session_id)))


@router.get("/{session_id}/requests/{index}", response_model=IndexedIdentifier)
async def get_session_request_at(
    session_id: str,
    index: int,
    ledger: LedgerDep,
) -> IndexedIdentifier:
    """Return the request id stored at ``index`` within a session."""
    key = path_identifier(session_id)
    return IndexedIdentifier(index=index, id=ledger.get_session_request_at(key, index))


@router.get("/{session_id}/detail", response_model=SessionResponse)
async def get_session(session_id: str, ledger: LedgerDep) -> LedgerSession:
    """Return a session's bookkeeping record."""
    session = ledger.get_session(path_identifier(session_id))
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session

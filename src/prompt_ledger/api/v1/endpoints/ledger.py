"""Prompt and response endpoints for the Prompt Ledger API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from prompt_ledger.api.v1.dependencies import CallerDep, LedgerDep, path_identifier
from prompt_ledger.schemas.ledger import (
    CountResponse,
    IndexedIdentifier,
    PromptResponse,
    PromptSubmit,
    ResponseBatch,
    ResponseBatchResult,
    ResponseSet,
    ResponseView,
)
from prompt_ledger.utils.identifiers import ZERO_ID

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.post("/prompts", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def submit_prompt(
    payload: PromptSubmit,
    caller: CallerDep,
    ledger: LedgerDep,
) -> PromptResponse:
    """Record a prompt submission for the authenticated caller.

    Args:
        payload: Request id and prompt hash
        caller: Authenticated caller address
        ledger: Ledger bound to the request's database session

    Returns:
        The stored prompt record
    """
    record = ledger.submit_prompt(caller, payload.request_id, payload.prompt_hash)
    return PromptResponse.model_validate(record)


@router.get("/prompts/{request_id}", response_model=PromptResponse)
async def get_prompt(request_id: str, ledger: LedgerDep) -> PromptResponse:
    """Return a prompt record together with its response, if any."""
    key = path_identifier(request_id)
    record = ledger.get_prompt(key)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found",
        )
    response_hash = ledger.get_response(key)
    return PromptResponse.model_validate(
        {
            "request_id": record.request_id,
            "order_index": record.order_index,
            "sender": record.sender,
            "block": record.block,
            "prompt_hash": record.prompt_hash,
            "response_hash": None if response_hash == ZERO_ID else response_hash,
        }
    )


@router.get("/requests/count", response_model=CountResponse)
async def total_requests(ledger: LedgerDep) -> CountResponse:
    return CountResponse(count=ledger.total_requests())


@router.get("/requests/{index}", response_model=IndexedIdentifier)
async def get_request_at(index: int, ledger: LedgerDep) -> IndexedIdentifier:
    """Return the request id at ``index`` in submission order."""
    return IndexedIdentifier(index=index, id=ledger.get_request_at(index))


@router.put("/responses/{request_id}", response_model=ResponseView)
async def set_response(
    request_id: str,
    payload: ResponseSet,
    caller: CallerDep,
    ledger: LedgerDep,
) -> ResponseView:
    """Write the operator's response for a request exactly once."""
    key = path_identifier(request_id)
    record = ledger.set_response(caller, key, payload.response_hash)
    return ResponseView(request_id=key, response_hash=record.response_hash, is_set=True)


@router.post("/responses/batch", response_model=ResponseBatchResult)
async def set_response_batch(
    payload: ResponseBatch,
    caller: CallerDep,
    ledger: LedgerDep,
) -> ResponseBatchResult:
    """Write a batch of responses, skipping entries that cannot be written."""
    written = ledger.set_response_batch(caller, payload.request_ids, payload.response_hashes)
    return ResponseBatchResult(count=len(payload.request_ids), written=written)


@router.get("/responses/{request_id}", response_model=ResponseView)
async def get_response(request_id: str, ledger: LedgerDep) -> ResponseView:
    """Return the stored response; the zero id means none is set yet."""
    key = path_identifier(request_id)
    response_hash = ledger.get_response(key)
    return ResponseView(request_id=key, response_hash=response_hash, is_set=response_hash != ZERO_ID)


@router.get("/prompts", response_model=list[IndexedIdentifier])
async def list_requests(
    ledger: LedgerDep,
    start: int = Query(0, ge=0, description="First index to return"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of ids to return"),
) -> list[IndexedIdentifier]:
    """List request ids in submission order by linear index access."""
    end = min(ledger.total_requests(), start + limit)
    return [IndexedIdentifier(index=i, id=ledger.get_request_at(i)) for i in range(start, end)]

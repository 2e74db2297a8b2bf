"""System and transparency endpoints for the Prompt Ledger API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from prompt_ledger.api.v1.dependencies import CallerDep, LedgerDep
from prompt_ledger.core.settings import settings

router = APIRouter(prefix="/system", tags=["system", "transparency"])


class PauseUpdate(BaseModel):
    paused: bool


@router.get("/config")
async def get_public_config(ledger: LedgerDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for transparency UIs.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "jwt_algorithm": settings.jwt_algorithm,
            "debug": settings.debug,
        },
        "roles": {
            "operator": ledger.operator,
            "session_keeper": ledger.session_keeper,
        },
        "limits": {
            "max_total_requests": ledger.max_total_requests,
            "max_session_requests": ledger.max_session_requests,
            "max_batch_size": ledger.max_batch_size,
        },
    }


@router.get("/clock")
async def get_clock(ledger: LedgerDep) -> dict[str, int]:
    """Expose the current sequence marker for transparency and tooling."""
    return {"block": ledger.current_block()}


@router.get("/pause")
async def get_pause(ledger: LedgerDep) -> dict[str, bool]:
    return {"paused": ledger.is_paused()}


@router.put("/pause")
async def set_pause(payload: PauseUpdate, caller: CallerDep, ledger: LedgerDep) -> dict[str, bool]:
    """Toggle the global pause flag; operator only."""
    return {"paused": ledger.set_paused(caller, payload.paused)}


@router.get("/events")
async def list_events(
    ledger: LedgerDep,
    after: int = Query(0, ge=0, description="Return events with id greater than this"),
    limit: int = Query(100, ge=1, le=500),
) -> list[dict[str, Any]]:
    """Page through the append-only notification log."""
    return [
        {
            "id": event.id,
            "kind": event.kind,
            "block": event.block,
            "payload": event.payload,
        }
        for event in ledger.events(after=after, limit=limit)
    ]

# src/prompt_ledger/schemas/session.py
"""Session-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from .common import Identifier


class SessionCreate(BaseModel):
    """Schema for creating a session."""

    session_id: Identifier


class SessionAppend(BaseModel):
    """Schema for appending a request id to a session."""

    request_id: Identifier


class SessionResponse(BaseModel):
    """Schema for session information returned by the API."""

    session_id: Identifier
    order_index: int
    request_count: int
    block: int

    model_config = ConfigDict(from_attributes=True)


class SessionRequestResponse(BaseModel):
    """A single slot in a session's request sequence."""

    session_id: Identifier
    position: int
    request_id: Identifier

    model_config = ConfigDict(from_attributes=True)

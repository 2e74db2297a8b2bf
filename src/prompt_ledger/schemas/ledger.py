# src/prompt_ledger/schemas/ledger.py
"""Prompt and response Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import Identifier


class PromptSubmit(BaseModel):
    """Schema for submitting a prompt."""

    request_id: Identifier = Field(..., description="Caller-chosen request id")
    prompt_hash: Identifier = Field(..., description="Opaque hash of the prompt content")


class ResponseSet(BaseModel):
    """Schema for the operator's single response commitment."""

    response_hash: Identifier


class ResponseBatch(BaseModel):
    """Schema for a batch of response commitments.

    Length checks happen in the ledger so that mismatched or oversized
    batches surface as ``invalid_length`` rather than validation errors.
    """

    request_ids: list[Identifier]
    response_hashes: list[Identifier]


class ResponseBatchResult(BaseModel):
    """Outcome of a batch write."""

    count: int = Field(..., description="Nominal batch length")
    written: int = Field(..., description="Responses actually written")


class PromptResponse(BaseModel):
    """Schema for prompt information returned by the API."""

    request_id: str
    order_index: int
    sender: str
    block: int
    prompt_hash: str
    response_hash: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _encode_binary_fields(cls, data: object) -> object:
        if not isinstance(data, dict):
            extracted: dict[str, object | None] = {}
            for field_name in cls.model_fields:
                extracted[field_name] = getattr(data, field_name, None)
            data = extracted

        for field_name in ("request_id", "prompt_hash", "response_hash"):
            value = data.get(field_name)
            if isinstance(value, bytes | bytearray):
                data[field_name] = "0x" + bytes(value).hex()
        return data

    model_config = ConfigDict(from_attributes=True)


class ResponseView(BaseModel):
    """The stored response for a request; the zero id when unset."""

    request_id: Identifier
    response_hash: Identifier
    is_set: bool


class IndexedIdentifier(BaseModel):
    """An identifier read from an ordered index."""

    index: int
    id: Identifier


class CountResponse(BaseModel):
    count: int

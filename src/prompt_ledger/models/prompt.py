# src/prompt_ledger/models/prompt.py
"""SQLAlchemy models for prompt submissions and their responses."""

from sqlalchemy import BigInteger, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from prompt_ledger.db.session import Base


class PromptRecord(Base):
    """A prompt submitted by any caller, written exactly once per request id."""

    __tablename__ = "prompt_record"

    request_id: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    # Position in the global request index; dense and starting at zero.
    order_index: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    sender: Mapped[str] = mapped_column(String(42), nullable=False)
    block: Mapped[int] = mapped_column(BigInteger, nullable=False)
    prompt_hash: Mapped[bytes] = mapped_column(LargeBinary(32), nullable=False)


class ResponseRecord(Base):
    """The operator's response commitment for a request.

    Keyed by the same request id as ``PromptRecord`` by convention only; a
    response may exist for an id that was never submitted.
    """

    __tablename__ = "response_record"

    request_id: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    # Never the zero sentinel; absence of a row reads as "not yet set".
    response_hash: Mapped[bytes] = mapped_column(LargeBinary(32), nullable=False)
    block: Mapped[int] = mapped_column(BigInteger, nullable=False)

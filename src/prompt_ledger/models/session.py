# src/prompt_ledger/models/session.py
"""SQLAlchemy models for named request sessions."""

from sqlalchemy import BigInteger, ForeignKey, Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from prompt_ledger.db.session import Base


class LedgerSession(Base):
    """A named, ordered, bounded collection of request ids."""

    __tablename__ = "ledger_session"

    session_id: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    # Position in the global session index.
    order_index: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    request_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    block: Mapped[int] = mapped_column(BigInteger, nullable=False)


class SessionRequest(Base):
    """One slot in a session's request sequence.

    No uniqueness or existence check against submitted prompts; the same
    request id (or the zero id) may appear any number of times.
    """

    __tablename__ = "session_request"

    session_id: Mapped[bytes] = mapped_column(
        LargeBinary(32),
        ForeignKey("ledger_session.session_id"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    request_id: Mapped[bytes] = mapped_column(LargeBinary(32), nullable=False)

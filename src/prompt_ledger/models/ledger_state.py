# src/prompt_ledger/models/ledger_state.py
"""Ledger-wide bookkeeping."""

from sqlalchemy import BigInteger, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from prompt_ledger.db.session import Base


class LedgerState(Base):
    """Singleton row holding the pause flag, counters and sequence marker.

    ``block_seq`` advances by one for every committed mutating call and is
    stamped on the records and events that call produces.
    """

    __tablename__ = "ledger_state"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, default=1)
    paused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    block_seq: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    request_total: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    session_total: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

# src/prompt_ledger/models/event.py
"""Append-only notification log."""

from typing import Any

from sqlalchemy import JSON, BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from prompt_ledger.db.session import Base


class LedgerEvent(Base):
    """A notification emitted by a committed ledger call."""

    __tablename__ = "ledger_event"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    block: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Identifiers are stored hex-encoded so the payload stays JSON-native.
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

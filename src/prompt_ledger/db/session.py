"""Engine and session factory for the ledger database."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from prompt_ledger.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ledger tables."""


# Populate Base.metadata before create_all or Alembic reads it.
import prompt_ledger.models  # noqa: E402,F401


def engine_options(url: str) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments suited to ``url``.

    Sync dependencies run in FastAPI's threadpool, so SQLite connections must
    be usable from threads other than the one that opened them. An in-memory
    SQLite database only exists per connection and is pinned to one.
    """
    parsed = make_url(url)
    options: dict[str, Any] = {"echo": settings.sql_debug}
    if parsed.get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
        return options

    options["connect_args"] = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(
    settings.effective_database_url,
    **engine_options(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session per request; ledger calls commit on their own."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    Base.metadata.drop_all(bind=engine)

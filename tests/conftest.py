# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tests.factories import (
    ALICE,
    BOB,
    MAX_BATCH_SIZE,
    MAX_SESSION_REQUESTS,
    MAX_TOTAL_REQUESTS,
    OPERATOR,
    SESSION_KEEPER,
)

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["LEDGER_OPERATOR_ADDRESS"] = OPERATOR
os.environ["LEDGER_SESSION_KEEPER_ADDRESS"] = SESSION_KEEPER

from prompt_ledger.api.v1.dependencies import get_ledger  # noqa: E402
from prompt_ledger.core.security import create_access_token  # noqa: E402
from prompt_ledger.db.session import Base  # noqa: E402
from prompt_ledger.db.session import get_db as app_get_session  # noqa: E402
from prompt_ledger.main import app as fastapi_app  # noqa: E402
from prompt_ledger.services.events import EventBus  # noqa: E402
from prompt_ledger.services.ledger import Ledger  # noqa: E402

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ledger calls commit, so every test wipes the tables afterwards.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


def _small_ledger(db: Session, bus: EventBus) -> Ledger:
    return Ledger(
        db,
        operator=OPERATOR,
        session_keeper=SESSION_KEEPER,
        max_total_requests=MAX_TOTAL_REQUESTS,
        max_session_requests=MAX_SESSION_REQUESTS,
        max_batch_size=MAX_BATCH_SIZE,
        bus=bus,
    )


@pytest.fixture()
def ledger(db_session: Session, bus: EventBus) -> Ledger:
    """A ledger with small limits so the bounds are reachable in tests."""
    return _small_ledger(db_session, bus)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def small_limits(app: FastAPI, db_session: Session, bus: EventBus) -> Iterator[None]:
    """Serve the API from a ledger with the small test limits."""
    app.dependency_overrides[get_ledger] = lambda: _small_ledger(db_session, bus)
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_ledger, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _headers(address: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(address)}"}


@pytest.fixture()
def operator_headers() -> dict[str, str]:
    return _headers(OPERATOR)


@pytest.fixture()
def keeper_headers() -> dict[str, str]:
    return _headers(SESSION_KEEPER)


@pytest.fixture()
def alice_headers() -> dict[str, str]:
    return _headers(ALICE)


@pytest.fixture()
def bob_headers() -> dict[str, str]:
    return _headers(BOB)

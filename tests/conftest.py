from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
from typing import Any, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fleetdesk.database import Base, get_db
from fleetdesk.inbox.errors import StoreUnavailable
from fleetdesk.inbox.messages import ExternalRow, InternalRow
from fleetdesk.inbox.normalizer import normalize, normalize_internal
from fleetdesk.inbox.policy import Predicate
from fleetdesk.inbox.store import RoleRecord
from fleetdesk.main import app
import fleetdesk.models.account  # noqa: F401
import fleetdesk.models.contact  # noqa: F401
import fleetdesk.models.people  # noqa: F401
import fleetdesk.models.session  # noqa: F401


T0 = datetime(2024, 1, 15, 12, 0, 0)


def at(seconds: int) -> datetime:
    return T0 + timedelta(seconds=seconds)


def internal_row(id: int, t: int = 0, **overrides: Any) -> InternalRow:
    base = {
        "id": id,
        "message": f"internal body {id}",
        "created_at": at(t),
        "sender": "Dana Driver",
        "sender_email": "dana@example.com",
        "receiver": "Cole Coordinator",
        "receiver_email": "cole@example.com",
        "subject": "Payment",
        "driver_id": 1,
        "coordinator_id": 1,
    }
    base.update(overrides)
    return InternalRow(**base)


def external_row(id: int, t: int = 0, **overrides: Any) -> ExternalRow:
    base = {
        "id": id,
        "created_at": at(t),
        "name": "Pat Public",
        "email": "pat@example.com",
        "subject": "Fleet financing",
        "message": "Please call me back about financing.",
    }
    base.update(overrides)
    return ExternalRow(**base)


class FakeStore:
    """In-memory MessageStore with switchable failures."""

    def __init__(self, internal=(), external=()) -> None:
        self.internal = {r.id: r for r in internal}
        self.external = {r.id: r for r in external}
        self.fail_internal = False
        self.fail_external = False
        self.fail_updates = False
        self.updates: list[tuple[int, dict]] = []

    async def query_internal(self, predicate: Predicate) -> list[InternalRow]:
        if self.fail_internal:
            raise StoreUnavailable("internal down")
        return [r for r in self.internal.values() if predicate.matches(normalize_internal(r))]

    async def query_external(self, predicate: Predicate) -> list[ExternalRow]:
        if self.fail_external:
            raise StoreUnavailable("external down")
        return [r for r in self.external.values() if predicate.matches(normalize(r))]

    async def update_internal(self, message_id: int, patch: dict) -> bool:
        self.updates.append((message_id, dict(patch)))
        if self.fail_updates or message_id not in self.internal:
            return False
        row = self.internal[message_id]
        self.internal[message_id] = InternalRow(**{**row.__dict__, **patch})
        return True


class FakeRoleTable:
    def __init__(self, records: Optional[dict[str, RoleRecord]] = None, fail: bool = False) -> None:
        self.records = records or {}
        self.fail = fail
        self.calls = 0

    async def find_by_email(self, email: str) -> Optional[RoleRecord]:
        self.calls += 1
        if self.fail:
            raise StoreUnavailable("role table down")
        return self.records.get(email)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

# fleetdesk/inbox/store.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from starlette.concurrency import run_in_threadpool

from fleetdesk.inbox.errors import StoreUnavailable
from fleetdesk.inbox.messages import ExternalRow, InternalRow
from fleetdesk.inbox.policy import Predicate
from fleetdesk.models.contact import Contact, ContactUs
from fleetdesk.models.people import Admin, Coordinator, Driver

logger = logging.getLogger(__name__)

# Only these columns may be patched through update_internal
MUTABLE_FIELDS = frozenset({"is_read", "is_starred"})


class MessageStore(Protocol):
    async def query_internal(self, predicate: Predicate) -> list[InternalRow]: ...

    async def query_external(self, predicate: Predicate) -> list[ExternalRow]: ...

    async def update_internal(self, message_id: int, patch: dict) -> bool: ...


@dataclass(frozen=True)
class RoleRecord:
    id: int
    banned: bool
    name: str = ""


class RoleTable(Protocol):
    async def find_by_email(self, email: str) -> Optional[RoleRecord]: ...


def _internal_row(c: Contact) -> InternalRow:
    return InternalRow(
        id=int(c.id),
        message=c.message,
        created_at=c.created_at,
        sender=c.sender,
        sender_email=c.sender_email,
        receiver=c.receiver,
        receiver_email=c.receiver_email,
        subject=(c.subject.subject if c.subject else None),
        attachment=c.attachment,
        driver_id=c.driver_id,
        coordinator_id=c.coordinator_id,
        is_read=bool(c.is_read),
        is_starred=bool(c.is_starred),
        driver_avatar=(c.driver.avatar if c.driver else None),
    )


def _external_row(c: ContactUs) -> ExternalRow:
    return ExternalRow(
        id=int(c.id),
        created_at=c.created_at,
        name=c.name,
        email=c.email,
        subject=c.subject,
        message=c.message,
        phone=c.phone,
        company=c.company,
    )


class SqlMessageStore:
    """
    MessageStore over the `contact` / `contact_us` tables.

    The session is synchronous; each call runs in Starlette's threadpool so the
    inbox core can await it. A Session is not thread-safe, so calls on one
    store are serialized.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self._lock = asyncio.Lock()

    async def _run(self, fn, *args):
        async with self._lock:
            return await run_in_threadpool(fn, *args)

    # ----------------------------
    # Internal (contact)
    # ----------------------------

    def _query_internal(self, predicate: Predicate) -> list[InternalRow]:
        q = self.db.query(Contact).options(
            selectinload(Contact.subject),
            selectinload(Contact.driver),
        )

        if predicate.message_id is not None:
            q = q.filter(Contact.id == int(predicate.message_id))
        if predicate.owner_driver_id is not None:
            q = q.filter(Contact.driver_id == int(predicate.owner_driver_id))
        if predicate.owner_coordinator_id is not None:
            q = q.filter(Contact.coordinator_id == int(predicate.owner_coordinator_id))
        if predicate.sender_name is not None:
            q = q.filter(Contact.sender == predicate.sender_name)
        if predicate.is_read is not None:
            q = q.filter(Contact.is_read == bool(predicate.is_read))
        if predicate.is_starred is not None:
            q = q.filter(Contact.is_starred == bool(predicate.is_starred))

        rows = q.order_by(Contact.created_at.desc(), Contact.id.desc()).all()
        return [_internal_row(c) for c in rows]

    async def query_internal(self, predicate: Predicate) -> list[InternalRow]:
        try:
            return await self._run(self._query_internal, predicate)
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"contact query failed: {exc}") from exc

    def _update_internal(self, message_id: int, patch: dict) -> bool:
        try:
            msg = self.db.query(Contact).filter(Contact.id == int(message_id)).first()
            if not msg:
                return False
            for field, value in patch.items():
                setattr(msg, field, bool(value))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True

    async def update_internal(self, message_id: int, patch: dict) -> bool:
        unknown = set(patch) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Not patchable: {sorted(unknown)}")
        try:
            return await self._run(self._update_internal, message_id, patch)
        except SQLAlchemyError:
            logger.exception("contact update failed id=%s patch=%s", message_id, patch)
            return False

    # ----------------------------
    # External (contact_us), read-only
    # ----------------------------

    def _query_external(self, predicate: Predicate) -> list[ExternalRow]:
        q = self.db.query(ContactUs)
        if predicate.message_id is not None:
            q = q.filter(ContactUs.id == int(predicate.message_id))
        rows = q.order_by(ContactUs.created_at.desc(), ContactUs.id.desc()).all()
        return [_external_row(c) for c in rows]

    async def query_external(self, predicate: Predicate) -> list[ExternalRow]:
        try:
            return await self._run(self._query_external, predicate)
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"contact_us query failed: {exc}") from exc


class SqlRoleTable:
    def __init__(self, db: Session, model: Type[Admin] | Type[Coordinator] | Type[Driver]) -> None:
        self.db = db
        self.model = model

    def _find(self, email: str) -> Optional[RoleRecord]:
        rec = self.db.query(self.model).filter(self.model.email == email).first()
        if not rec:
            return None
        return RoleRecord(id=int(rec.id), banned=bool(rec.banned), name=rec.name or "")

    async def find_by_email(self, email: str) -> Optional[RoleRecord]:
        try:
            return await run_in_threadpool(self._find, email)
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"{self.model.__tablename__} lookup failed: {exc}") from exc

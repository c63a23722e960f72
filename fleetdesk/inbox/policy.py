# fleetdesk/inbox/policy.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from fleetdesk.config import ADMIN_DISPLAY_NAME
from fleetdesk.inbox.messages import Identity, InboxFilter, Role, UnifiedMessage


@dataclass(frozen=True)
class Predicate:
    """
    Conjunction of equality constraints on a message.
    A field left as None does not constrain anything.
    """

    message_id: Optional[int] = None
    owner_driver_id: Optional[int] = None
    owner_coordinator_id: Optional[int] = None
    sender_name: Optional[str] = None
    is_read: Optional[bool] = None
    is_starred: Optional[bool] = None

    def matches(self, m: UnifiedMessage) -> bool:
        checks = (
            (self.message_id, m.id),
            (self.owner_driver_id, m.owner_driver_id),
            (self.owner_coordinator_id, m.owner_coordinator_id),
            (self.sender_name, m.sender_name),
            (self.is_read, m.is_read),
            (self.is_starred, m.is_starred),
        )
        return all(want is None or want == got for want, got in checks)


@dataclass(frozen=True)
class QueryPlan:
    # None = do not query that source at all
    internal: Optional[Predicate]
    external: Optional[Predicate]


EMPTY_PLAN = QueryPlan(internal=None, external=None)


def _owner_scope(identity: Identity) -> Predicate:
    if identity.role is Role.DRIVER:
        return Predicate(owner_driver_id=identity.entity_id)
    return Predicate(owner_coordinator_id=identity.entity_id)


def _with(p: Predicate, **fields) -> Predicate:
    return replace(p, **fields)


def sent_name(identity: Identity) -> str:
    if identity.role is Role.ADMIN:
        return identity.display_name or ADMIN_DISPLAY_NAME
    return identity.display_name


def plan(identity: Identity, inbox_filter: InboxFilter | str) -> QueryPlan:
    """
    Derive the per-source predicates for a viewer and a named filter.

    External rows are only ever planned for Admin + Important: they are
    unactioned public inquiries and cannot be marked read.
    """
    f = inbox_filter if isinstance(inbox_filter, InboxFilter) else InboxFilter.parse(inbox_filter)

    if identity.role is Role.ADMIN:
        if f is InboxFilter.ALL:
            return QueryPlan(internal=Predicate(), external=None)
        if f is InboxFilter.STARRED:
            return QueryPlan(internal=Predicate(is_starred=True), external=None)
        if f is InboxFilter.IMPORTANT:
            return QueryPlan(internal=Predicate(is_read=False), external=Predicate())
        return QueryPlan(internal=Predicate(sender_name=sent_name(identity)), external=None)

    if identity.role in (Role.DRIVER, Role.COORDINATOR):
        if identity.entity_id is None:
            return EMPTY_PLAN
        scope = _owner_scope(identity)
        if f is InboxFilter.ALL:
            return QueryPlan(internal=scope, external=None)
        if f is InboxFilter.STARRED:
            return QueryPlan(internal=_with(scope, is_starred=True), external=None)
        if f is InboxFilter.IMPORTANT:
            return QueryPlan(internal=_with(scope, is_read=False), external=None)
        if not identity.display_name:
            return EMPTY_PLAN
        return QueryPlan(internal=Predicate(sender_name=sent_name(identity)), external=None)

    # Role.NONE: authenticated but unprivileged
    return EMPTY_PLAN


def can_view(identity: Identity, message: UnifiedMessage) -> bool:
    """Single-message visibility, consistent with the union of all filters."""
    if identity.role is Role.ADMIN:
        return True
    if message.is_external or identity.role is Role.NONE or identity.entity_id is None:
        return False
    if _owner_scope(identity).matches(message):
        return True
    return bool(identity.display_name) and message.sender_name == identity.display_name

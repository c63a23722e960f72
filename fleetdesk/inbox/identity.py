# fleetdesk/inbox/identity.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from fleetdesk.inbox.errors import StoreUnavailable
from fleetdesk.inbox.messages import Identity, Role
from fleetdesk.inbox.store import RoleRecord, RoleTable, SqlRoleTable
from fleetdesk.models.people import Admin, Coordinator, Driver

logger = logging.getLogger(__name__)

UNPRIVILEGED = Identity(role=Role.NONE)


@dataclass
class SessionContext:
    """
    Per-session state the resolver reads and writes.
    The HTTP layer loads it from the session row and saves it back.
    """

    email: str
    identity: Optional[Identity] = None
    terminated: bool = False

    def cache(self, identity: Identity) -> None:
        self.identity = identity

    def invalidate(self) -> None:
        self.identity = None

    def terminate(self) -> None:
        self.invalidate()
        self.terminated = True


class IdentityResolver:
    """
    Probes every role table. A banned record in any of them ends the session;
    otherwise the earliest table holding the email decides the role.
    """

    def __init__(self, lookups: Sequence[tuple[Role, RoleTable]]) -> None:
        self.lookups = list(lookups)

    async def resolve(self, session: SessionContext) -> Optional[Identity]:
        """Returns None when the session is (or becomes) unauthenticated."""
        if session.terminated:
            return None
        if session.identity is not None:
            return session.identity

        matches: list[tuple[Role, RoleRecord]] = []
        for role, table in self.lookups:
            try:
                record = await table.find_by_email(session.email)
            except StoreUnavailable as exc:
                # a ban can't be ruled out, so no role is granted
                logger.warning("role lookup failed role=%s email=%s: %s", role.value, session.email, exc)
                return UNPRIVILEGED

            if record is None:
                continue

            if record.banned:
                logger.warning("banned account signed in role=%s email=%s", role.value, session.email)
                session.terminate()
                return None

            matches.append((role, record))

        if not matches:
            return UNPRIVILEGED

        role, record = matches[0]
        identity = Identity(role=role, entity_id=record.id, display_name=record.name)
        session.cache(identity)
        return identity


def sql_resolver(db: Session) -> IdentityResolver:
    return IdentityResolver(
        [
            (Role.ADMIN, SqlRoleTable(db, Admin)),
            (Role.COORDINATOR, SqlRoleTable(db, Coordinator)),
            (Role.DRIVER, SqlRoleTable(db, Driver)),
        ]
    )

# fleetdesk/inbox/queriers.py
from __future__ import annotations

import logging
from typing import Optional

from fleetdesk.inbox.errors import StoreUnavailable
from fleetdesk.inbox.messages import UnifiedMessage
from fleetdesk.inbox.normalizer import normalize, normalize_internal
from fleetdesk.inbox.policy import Predicate
from fleetdesk.inbox.store import MessageStore

logger = logging.getLogger(__name__)


class InternalQuerier:
    def __init__(self, store: MessageStore) -> None:
        self.store = store

    async def fetch(self, predicate: Optional[Predicate]) -> list[UnifiedMessage]:
        if predicate is None:
            return []
        try:
            rows = await self.store.query_internal(predicate)
        except StoreUnavailable as exc:
            logger.warning("internal source unavailable, showing none: %s", exc)
            return []
        return [normalize_internal(r) for r in rows]


class ExternalQuerier:
    def __init__(self, store: MessageStore) -> None:
        self.store = store

    async def fetch(self, predicate: Optional[Predicate]) -> list[UnifiedMessage]:
        if predicate is None:
            return []
        try:
            rows = await self.store.query_external(predicate)
        except StoreUnavailable as exc:
            logger.warning("external source unavailable, showing none: %s", exc)
            return []
        return [normalize(r) for r in rows]

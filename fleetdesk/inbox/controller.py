# fleetdesk/inbox/controller.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fleetdesk.inbox.errors import MessageNotFound
from fleetdesk.inbox.merger import merge
from fleetdesk.inbox.messages import (
    Identity,
    InboxFilter,
    MessageKey,
    SourceKind,
    UnifiedMessage,
)
from fleetdesk.inbox.mutator import InboxView, MutationResult, StateMutator
from fleetdesk.inbox.policy import Predicate, can_view, plan
from fleetdesk.inbox.queriers import ExternalQuerier, InternalQuerier
from fleetdesk.inbox.store import MessageStore

logger = logging.getLogger(__name__)


class InboxController:
    """
    One viewer's inbox. The identity must already be resolved; the
    internal predicate cannot be built without it.
    """

    def __init__(self, store: MessageStore, identity: Identity) -> None:
        self.identity = identity
        self.internal = InternalQuerier(store)
        self.external = ExternalQuerier(store)
        self.view = InboxView()
        self.mutator = StateMutator(store, self.view)
        self.active_filter: InboxFilter = InboxFilter.ALL
        self.selected: Optional[UnifiedMessage] = None
        self._generation = 0

    @property
    def messages(self) -> list[UnifiedMessage]:
        return self.view.messages

    @property
    def errors(self):
        return self.view.errors

    async def set_filter(self, inbox_filter: InboxFilter | str) -> Optional[list[UnifiedMessage]]:
        """
        Load the list for a filter. Returns None when a later call to
        set_filter started before this one finished; its result is dropped.
        """
        f = inbox_filter if isinstance(inbox_filter, InboxFilter) else InboxFilter.parse(inbox_filter)

        self._generation += 1
        generation = self._generation
        self.active_filter = f

        p = plan(self.identity, f)
        internal, external = await asyncio.gather(
            self.internal.fetch(p.internal),
            self.external.fetch(p.external),
        )

        if generation != self._generation:
            logger.debug("discarding stale inbox response filter=%s", f.value)
            return None

        merged = merge(internal, external)
        self.view.replace_all(merged)
        return merged

    async def open(self, key: MessageKey) -> UnifiedMessage:
        """Load one message into the view if the viewer may see it."""
        cached = self.view.get(key)
        if cached is not None:
            return cached

        querier = self.internal if key.source_kind is SourceKind.INTERNAL else self.external
        found = await querier.fetch(Predicate(message_id=int(key.id)))
        if not found or not can_view(self.identity, found[0]):
            # don't leak whether the id exists
            raise MessageNotFound(f"{key.source_kind.value}:{key.id}")

        self.view.put(found[0])
        return found[0]

    async def select(self, key: MessageKey) -> MutationResult:
        """Opening a message marks it read."""
        await self.open(key)
        result = await self.mutator.mark_read(key)
        self.selected = result.message
        return result

    async def toggle_star(self, key: MessageKey) -> MutationResult:
        await self.open(key)
        result = await self.mutator.toggle_star(key)
        if self.selected is not None and self.selected.key == key:
            self.selected = result.message
        return result

    def unread_count(self) -> int:
        return sum(1 for m in self.view.messages if not m.is_read)

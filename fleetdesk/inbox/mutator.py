# fleetdesk/inbox/mutator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from fleetdesk.inbox.errors import MessageNotFound, MutationFailed
from fleetdesk.inbox.messages import MessageKey, UnifiedMessage
from fleetdesk.inbox.store import MessageStore

logger = logging.getLogger(__name__)


@dataclass
class InboxView:
    """What the viewer currently sees: the ordered list plus surfaced errors."""

    messages: list[UnifiedMessage] = field(default_factory=list)
    errors: list[MutationFailed] = field(default_factory=list)

    def replace_all(self, messages: list[UnifiedMessage]) -> None:
        self.messages = list(messages)

    def get(self, key: MessageKey) -> Optional[UnifiedMessage]:
        for m in self.messages:
            if m.key == key:
                return m
        return None

    def put(self, message: UnifiedMessage) -> None:
        for i, m in enumerate(self.messages):
            if m.key == message.key:
                self.messages[i] = message
                return
        self.messages.append(message)


@dataclass(frozen=True)
class MutationResult:
    message: UnifiedMessage
    persisted: bool
    error: Optional[MutationFailed] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StateMutator:
    """
    Two-phase read/star changes: apply to the view first, then persist.
    A failed persist keeps the local change and records a MutationFailed.
    """

    def __init__(self, store: MessageStore, view: InboxView) -> None:
        self.store = store
        self.view = view

    def _current(self, key: MessageKey) -> UnifiedMessage:
        msg = self.view.get(key)
        if msg is None:
            raise MessageNotFound(f"{key.source_kind.value}:{key.id}")
        return msg

    async def _apply(self, msg: UnifiedMessage, patch: dict) -> MutationResult:
        updated = replace(msg, **patch)
        self.view.put(updated)

        if await self.store.update_internal(msg.id, patch):
            return MutationResult(message=updated, persisted=True)

        error = MutationFailed(msg.key, patch)
        logger.error("inbox mutation not persisted: %s", error)
        self.view.errors.append(error)
        return MutationResult(message=updated, persisted=False, error=error)

    async def mark_read(self, key: MessageKey) -> MutationResult:
        msg = self._current(key)
        if msg.is_external or msg.is_read:
            return MutationResult(message=msg, persisted=False)
        return await self._apply(msg, {"is_read": True})

    async def toggle_star(self, key: MessageKey) -> MutationResult:
        msg = self._current(key)
        if msg.is_external:
            return MutationResult(message=msg, persisted=False)
        return await self._apply(msg, {"is_starred": not msg.is_starred})

# fleetdesk/inbox/errors.py
from __future__ import annotations


class InboxError(Exception):
    """Base class for inbox failures."""


class StoreUnavailable(InboxError):
    """The backing store could not answer (network/backend failure)."""


class MutationFailed(InboxError):
    """A read/star change was applied locally but could not be persisted."""

    def __init__(self, key, patch: dict, reason: str = "update rejected by store") -> None:
        self.key = key
        self.patch = dict(patch)
        self.reason = reason
        super().__init__(f"{key.source_kind.value}:{key.id} {self.patch} not saved: {reason}")


class BannedAccount(InboxError):
    """Terminal: the signed-in account is banned in one of the role tables."""


class MessageNotFound(InboxError):
    """No such message, or the viewer may not see it."""

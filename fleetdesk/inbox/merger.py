# fleetdesk/inbox/merger.py
from __future__ import annotations

from typing import Iterable

from fleetdesk.inbox.messages import SourceKind, UnifiedMessage


def sort_key(m: UnifiedMessage) -> tuple:
    # used with reverse=True: newest first, Internal before External, id desc
    return (m.created_at, m.source_kind is SourceKind.INTERNAL, m.id)


def merge(
    internal: Iterable[UnifiedMessage],
    external: Iterable[UnifiedMessage],
) -> list[UnifiedMessage]:
    return sorted([*internal, *external], key=sort_key, reverse=True)

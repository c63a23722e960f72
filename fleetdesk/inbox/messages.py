# fleetdesk/inbox/messages.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional


class SourceKind(str, enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class Role(str, enum.Enum):
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    DRIVER = "driver"
    NONE = "none"


class InboxFilter(str, enum.Enum):
    ALL = "All"
    STARRED = "Starred"
    IMPORTANT = "Important"
    SENT = "Sent"

    @classmethod
    def parse(cls, name: str) -> "InboxFilter":
        for f in cls:
            if f.value.lower() == str(name).strip().lower():
                return f
        raise ValueError(f"Unknown inbox filter: {name!r}")


class MessageKey(NamedTuple):
    source_kind: SourceKind
    id: int


@dataclass(frozen=True)
class InternalRow:
    """Raw `contact` row plus joined display fields."""

    id: int
    message: str
    created_at: datetime
    sender: Optional[str] = None
    sender_email: Optional[str] = None
    receiver: Optional[str] = None
    receiver_email: Optional[str] = None
    subject: Optional[str] = None
    attachment: Optional[str] = None
    driver_id: Optional[int] = None
    coordinator_id: Optional[int] = None
    is_read: bool = False
    is_starred: bool = False
    driver_avatar: Optional[str] = None


@dataclass(frozen=True)
class ExternalRow:
    """Raw `contact_us` row. No read/star columns exist at the source."""

    id: int
    created_at: datetime
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None


@dataclass(frozen=True)
class UnifiedMessage:
    id: int
    source_kind: SourceKind
    sender_name: str
    sender_email: str
    receiver_name: str
    receiver_email: str
    subject: Optional[str]
    body: str
    created_at: datetime
    attachment_ref: Optional[str] = None
    is_read: bool = False
    is_starred: bool = False
    owner_driver_id: Optional[int] = None
    owner_coordinator_id: Optional[int] = None

    # joined display fields
    sender_avatar: Optional[str] = None
    sender_phone: Optional[str] = None
    sender_company: Optional[str] = None

    @property
    def key(self) -> MessageKey:
        return MessageKey(self.source_kind, self.id)

    @property
    def is_external(self) -> bool:
        return self.source_kind is SourceKind.EXTERNAL


@dataclass(frozen=True)
class Identity:
    role: Role
    entity_id: Optional[int] = None
    display_name: str = ""

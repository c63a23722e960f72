# fleetdesk/inbox/presentation.py
from __future__ import annotations

from datetime import datetime

from fleetdesk.inbox.messages import UnifiedMessage


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def relative_time(created_at: datetime, now: datetime) -> str:
    diff = int((now - created_at).total_seconds())
    mins = diff // 60
    hours = mins // 60
    days = hours // 24

    if diff < 60:
        return "Just now"
    if mins < 60:
        return _plural(mins, "min")
    if hours < 24:
        return _plural(hours, "hour")
    if days == 1:
        return "A day ago"
    return f"{days} days ago"


def submitted_label(created_at: datetime, now: datetime) -> str:
    clock = created_at.strftime("%I:%M %p")
    return f"{clock} · {relative_time(created_at, now)}"


def initials(name: str) -> str:
    return (name or "")[:2].upper()


def message_to_dict(m: UnifiedMessage, now: datetime) -> dict:
    return {
        "id": int(m.id),
        "source": m.source_kind.value,
        "sender_name": m.sender_name,
        "sender_email": m.sender_email,
        "receiver_name": m.receiver_name,
        "receiver_email": m.receiver_email,
        "subject": m.subject,
        "body": m.body,
        "created_at": m.created_at.isoformat(),
        "submitted": submitted_label(m.created_at, now),
        "attachment_ref": m.attachment_ref,
        "is_read": bool(m.is_read),
        "is_starred": bool(m.is_starred),
        "owner_driver_id": m.owner_driver_id,
        "owner_coordinator_id": m.owner_coordinator_id,
        "sender_avatar": m.sender_avatar,
        "sender_initials": initials(m.sender_name),
        "sender_phone": m.sender_phone,
        "sender_company": m.sender_company,
    }

# fleetdesk/inbox/normalizer.py
"""
The only place that knows the shape of source rows.

Everything downstream works on UnifiedMessage; a field missing at the source
gets an explicit default here instead of being dropped.
"""
from __future__ import annotations

from fleetdesk.config import ADMIN_DISPLAY_NAME, CONTACT_US_SUBJECT, UNKNOWN_SENDER
from fleetdesk.inbox.messages import ExternalRow, InternalRow, SourceKind, UnifiedMessage


def normalize(row: ExternalRow) -> UnifiedMessage:
    """Map a public contact-form row into the unified shape."""
    return UnifiedMessage(
        id=int(row.id),
        source_kind=SourceKind.EXTERNAL,
        sender_name=row.name or UNKNOWN_SENDER,
        sender_email=row.email or "",
        receiver_name=ADMIN_DISPLAY_NAME,
        receiver_email="",
        subject=row.subject or CONTACT_US_SUBJECT,
        body=row.message or "",
        created_at=row.created_at,
        attachment_ref=None,
        is_read=False,
        is_starred=False,
        owner_driver_id=None,
        owner_coordinator_id=None,
        sender_phone=row.phone,
        sender_company=row.company,
    )


def normalize_internal(row: InternalRow) -> UnifiedMessage:
    return UnifiedMessage(
        id=int(row.id),
        source_kind=SourceKind.INTERNAL,
        sender_name=row.sender or UNKNOWN_SENDER,
        sender_email=row.sender_email or "",
        receiver_name=row.receiver or "",
        receiver_email=row.receiver_email or "",
        subject=row.subject,
        body=row.message or "",
        created_at=row.created_at,
        attachment_ref=row.attachment,
        is_read=bool(row.is_read),
        is_starred=bool(row.is_starred),
        owner_driver_id=row.driver_id,
        owner_coordinator_id=row.coordinator_id,
        sender_avatar=row.driver_avatar,
    )

# fleetdesk/routes/inbox.py
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fleetdesk.config import INBOX_MAX_LIMIT
from fleetdesk.database import get_db
from fleetdesk.inbox.controller import InboxController
from fleetdesk.inbox.messages import Identity, InboxFilter, MessageKey, SourceKind
from fleetdesk.inbox.mutator import MutationResult
from fleetdesk.inbox.presentation import message_to_dict
from fleetdesk.inbox.store import SqlMessageStore
from fleetdesk.routes.auth import get_identity

router = APIRouter(prefix="/inbox", tags=["inbox"])


def get_controller(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
) -> InboxController:
    return InboxController(SqlMessageStore(db), identity)


def _parse_filter(name: str) -> InboxFilter:
    try:
        return InboxFilter.parse(name)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _mutation_to_dict(result: MutationResult) -> dict:
    d = {
        "ok": result.ok,
        "persisted": result.persisted,
        "message": message_to_dict(result.message, datetime.utcnow()),
    }
    if result.error is not None:
        # local change is kept; the client shows this instead of reverting
        d["error"] = result.error.reason
    return d


@router.get("")
async def inbox(
    controller: InboxController = Depends(get_controller),
    filter_name: str = Query("All", alias="filter", description="All | Starred | Important | Sent"),
    limit: int = Query(50, ge=1, le=INBOX_MAX_LIMIT),
) -> dict:
    """
    Returns the merged inbox for the signed-in viewer (newest first).
    External contact-form messages only show up for admins under Important.
    """
    f = _parse_filter(filter_name)
    msgs = await controller.set_filter(f) or []
    now = datetime.utcnow()

    page = msgs[:limit]
    return {
        "filter": f.value,
        "role": controller.identity.role.value,
        "messages": [message_to_dict(m, now) for m in page],
        "count": len(page),
        "total": len(msgs),
    }


@router.get("/unread_count")
async def unread_count(controller: InboxController = Depends(get_controller)) -> dict:
    # Important is exactly "needs attention": unread internal, plus external for admins
    await controller.set_filter(InboxFilter.IMPORTANT)
    return {
        "role": controller.identity.role.value,
        "unread": controller.unread_count(),
    }


@router.get("/{source}/{message_id}")
async def read_message(
    source: SourceKind,
    message_id: int,
    controller: InboxController = Depends(get_controller),
) -> dict:
    """Opening a message marks it read (internal messages only)."""
    result = await controller.select(MessageKey(source, int(message_id)))
    return _mutation_to_dict(result)


@router.post("/{source}/{message_id}/star")
async def toggle_star(
    source: SourceKind,
    message_id: int,
    controller: InboxController = Depends(get_controller),
) -> dict:
    result = await controller.toggle_star(MessageKey(source, int(message_id)))
    return _mutation_to_dict(result)

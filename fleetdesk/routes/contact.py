# fleetdesk/routes/contact.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from fleetdesk.database import get_db
from fleetdesk.inbox.contact import send_contact, submit_contact_us
from fleetdesk.inbox.messages import Identity
from fleetdesk.models.contact import Subject
from fleetdesk.models.session import SessionToken
from fleetdesk.routes.auth import get_current_session, get_identity

router = APIRouter(tags=["contact"])


class ContactRequest(BaseModel):
    subject_id: int = Field(ge=1)
    message: str = Field(min_length=1, max_length=10000)
    attachment_ref: Optional[str] = Field(default=None, max_length=512)
    # driver -> coordinator_id, coordinator -> driver_id
    coordinator_id: Optional[int] = Field(default=None, ge=1)
    driver_id: Optional[int] = Field(default=None, ge=1)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class ContactUsRequest(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=40)
    company: Optional[str] = Field(default=None, max_length=120)
    subject: Optional[str] = Field(default=None, max_length=200)
    service: Optional[str] = Field(default="higher-purchase", max_length=120)
    message: str = Field(min_length=5, max_length=10000)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        local, _, domain = v.strip().partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v.strip()

    @model_validator(mode="after")
    def strip_name(self) -> "ContactUsRequest":
        self.name = self.name.strip()
        return self


@router.get("/subjects")
def list_subjects(db: Session = Depends(get_db)) -> dict:
    rows = db.query(Subject).order_by(Subject.id.asc()).all()
    return {"subjects": [{"id": s.id, "subject": s.subject} for s in rows]}


@router.post("/contact", status_code=status.HTTP_201_CREATED)
def contact(
    payload: ContactRequest,
    db: Session = Depends(get_db),
    sess: SessionToken = Depends(get_current_session),
    identity: Identity = Depends(get_identity),
) -> dict:
    try:
        msg = send_contact(
            db,
            identity=identity,
            fallback_email=sess.account.email,
            subject_id=payload.subject_id,
            message=payload.message,
            attachment_ref=payload.attachment_ref,
            driver_id=payload.driver_id,
            coordinator_id=payload.coordinator_id,
        )
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    db.commit()
    db.refresh(msg)
    return {"ok": True, "id": int(msg.id)}


@router.post("/contact-us", status_code=status.HTTP_201_CREATED)
def contact_us(payload: ContactUsRequest, db: Session = Depends(get_db)) -> dict:
    """Public form; no sign-in."""
    row = submit_contact_us(
        db,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        company=payload.company,
        subject=payload.subject,
        service=payload.service,
        message=payload.message,
    )
    db.commit()
    db.refresh(row)
    return {"ok": True, "id": int(row.id)}

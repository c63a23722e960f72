# fleetdesk/inbox/contact.py
"""
Writers for the two inbox sources. The inbox itself never creates messages;
these are the contact-send action and the public contact form.
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from fleetdesk.config import UNKNOWN_SENDER
from fleetdesk.inbox.messages import Identity, Role
from fleetdesk.models.contact import Contact, ContactUs, Subject
from fleetdesk.models.people import Coordinator, Driver


def send_contact(
    db: Session,
    *,
    identity: Identity,
    fallback_email: str,
    subject_id: int,
    message: str,
    attachment_ref: str | None = None,
    driver_id: int | None = None,
    coordinator_id: int | None = None,
) -> Contact:
    """
    Driver -> coordinator, or coordinator -> driver.
    Does NOT commit; caller's transaction handles that.
    """
    if identity.role not in (Role.DRIVER, Role.COORDINATOR):
        raise PermissionError("Only drivers and coordinators can send messages")

    if db.query(Subject).filter(Subject.id == int(subject_id)).first() is None:
        raise LookupError("Unknown subject")

    if identity.role is Role.DRIVER:
        me = db.query(Driver).filter(Driver.id == identity.entity_id).first()
        other = (
            db.query(Coordinator).filter(Coordinator.id == coordinator_id).first()
            if coordinator_id is not None
            else None
        )
        owner_driver_id = identity.entity_id
        owner_coordinator_id = coordinator_id
    else:
        me = db.query(Coordinator).filter(Coordinator.id == identity.entity_id).first()
        other = db.query(Driver).filter(Driver.id == driver_id).first() if driver_id is not None else None
        owner_driver_id = driver_id
        owner_coordinator_id = identity.entity_id

    msg = Contact(
        subject_id=int(subject_id),
        message=str(message),
        sender=(me.name if me else None) or fallback_email,
        sender_email=(me.email if me else None) or fallback_email,
        receiver=(other.name if other else UNKNOWN_SENDER),
        receiver_email=(other.email if other else ""),
        attachment=attachment_ref,
        driver_id=owner_driver_id,
        coordinator_id=owner_coordinator_id,
        is_read=False,
        is_starred=False,
    )
    db.add(msg)
    db.flush()
    return msg


def submit_contact_us(
    db: Session,
    *,
    name: str,
    email: str,
    message: str,
    phone: str | None = None,
    company: str | None = None,
    subject: str | None = None,
    service: str | None = None,
) -> ContactUs:
    row = ContactUs(
        name=name,
        email=email,
        phone=phone,
        company=company,
        subject=subject if subject is not None else service,
        message=message,
    )
    db.add(row)
    db.flush()
    return row

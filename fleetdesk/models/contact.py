# fleetdesk/models/contact.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetdesk.database import Base
from fleetdesk.models.people import Driver


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(primary_key=True)
    subject: Mapped[str] = mapped_column(String(120), nullable=False)


class Contact(Base):
    """Internal message written by the contact-send action."""

    __tablename__ = "contact"

    id: Mapped[int] = mapped_column(primary_key=True)

    subject_id: Mapped[int | None] = mapped_column(ForeignKey("subjects.id"), nullable=True)
    subject: Mapped[Subject | None] = relationship()

    message: Mapped[str] = mapped_column(Text, nullable=False)

    sender: Mapped[str | None] = mapped_column(String(120), index=True, nullable=True)
    sender_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    receiver: Mapped[str | None] = mapped_column(String(120), nullable=True)
    receiver_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    attachment: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Visibility scope
    driver_id: Mapped[int | None] = mapped_column(ForeignKey("drivers.id"), index=True, nullable=True)
    driver: Mapped[Driver | None] = relationship()
    coordinator_id: Mapped[int | None] = mapped_column(
        ForeignKey("coordinators.id"), index=True, nullable=True
    )

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)
    is_starred: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True, nullable=False
    )


class ContactUs(Base):
    """Public contact-form submission. Has no read/star state."""

    __tablename__ = "contact_us"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    company: Mapped[str | None] = mapped_column(String(120), nullable=True)
    subject: Mapped[str | None] = mapped_column(String(200), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True, nullable=False
    )

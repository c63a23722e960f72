# fleetdesk/models/people.py
from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from fleetdesk.database import Base


class Admin(Base):
    __tablename__ = "admins"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)


class Coordinator(Base):
    __tablename__ = "coordinators"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    banned: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)


class Driver(Base):
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)  # storage object key
    banned: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)

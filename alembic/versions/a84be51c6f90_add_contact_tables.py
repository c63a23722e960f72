"""add contact, contact_us and subjects tables

Revision ID: a84be51c6f90
Revises: 3f1c9a07d2e4
Create Date: 2026-09-30 16:42:51.902117
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "a84be51c6f90"
down_revision: Union[str, Sequence[str], None] = "3f1c9a07d2e4"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "contact",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("sender", sa.String(length=120), nullable=True),
        sa.Column("sender_email", sa.String(length=255), nullable=True),
        sa.Column("receiver", sa.String(length=120), nullable=True),
        sa.Column("receiver_email", sa.String(length=255), nullable=True),
        sa.Column("attachment", sa.String(length=512), nullable=True),
        sa.Column("driver_id", sa.Integer(), nullable=True),
        sa.Column("coordinator_id", sa.Integer(), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("is_starred", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"]),
        sa.ForeignKeyConstraint(["driver_id"], ["drivers.id"]),
        sa.ForeignKeyConstraint(["coordinator_id"], ["coordinators.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_contact_sender"), "contact", ["sender"], unique=False)
    op.create_index(op.f("ix_contact_driver_id"), "contact", ["driver_id"], unique=False)
    op.create_index(op.f("ix_contact_coordinator_id"), "contact", ["coordinator_id"], unique=False)
    op.create_index(op.f("ix_contact_created_at"), "contact", ["created_at"], unique=False)

    op.create_table(
        "contact_us",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("company", sa.String(length=120), nullable=True),
        sa.Column("subject", sa.String(length=200), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_contact_us_created_at"), "contact_us", ["created_at"], unique=False)

    # Idempotent seed for SQLite: if rows already exist, do nothing.
    op.execute(
        """
        INSERT OR IGNORE INTO subjects (id, subject)
        VALUES
          (1, 'Payment'),
          (2, 'Bus maintenance'),
          (3, 'Contract'),
          (4, 'Other');
        """
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_contact_us_created_at"), table_name="contact_us")
    op.drop_table("contact_us")

    op.drop_index(op.f("ix_contact_created_at"), table_name="contact")
    op.drop_index(op.f("ix_contact_coordinator_id"), table_name="contact")
    op.drop_index(op.f("ix_contact_driver_id"), table_name="contact")
    op.drop_index(op.f("ix_contact_sender"), table_name="contact")
    op.drop_table("contact")

    op.drop_table("subjects")

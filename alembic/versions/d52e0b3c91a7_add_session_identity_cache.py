"""cache resolved identity on sessions

Revision ID: d52e0b3c91a7
Revises: a84be51c6f90
Create Date: 2026-10-06 09:21:37.440219
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "d52e0b3c91a7"
down_revision: Union[str, Sequence[str], None] = "a84be51c6f90"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("sessions") as batch:
        batch.add_column(sa.Column("role", sa.String(length=20), nullable=True))
        batch.add_column(sa.Column("entity_id", sa.Integer(), nullable=True))
        batch.add_column(sa.Column("display_name", sa.String(length=120), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("sessions") as batch:
        batch.drop_column("display_name")
        batch.drop_column("entity_id")
        batch.drop_column("role")

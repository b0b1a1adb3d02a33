"""Initial schema: appointments, system_settings, closed_dates.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

appointment_status = sa.Enum(
    "SCHEDULED", "IN_PROGRESS", "COMPLETED", "CANCELLED", "NO_SHOW", name="appointmentstatus"
)
booking_source = sa.Enum("STAFF", "PORTAL", name="bookingsource")


def upgrade() -> None:
    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("status", appointment_status, nullable=False),
        sa.Column("source", booking_source, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_appointments_date"), "appointments", ["date"], unique=False)
    op.create_index(op.f("ix_appointments_status"), "appointments", ["status"], unique=False)
    op.create_index("ix_appointments_date_start_time", "appointments", ["date", "start_time"], unique=False)

    op.create_table(
        "system_settings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("max_slots_staff", sa.Integer(), nullable=True),
        sa.Column("max_slots_portal", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "closed_dates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_closed_dates_date"), "closed_dates", ["date"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_closed_dates_date"), table_name="closed_dates")
    op.drop_table("closed_dates")
    op.drop_table("system_settings")
    op.drop_index("ix_appointments_date_start_time", table_name="appointments")
    op.drop_index(op.f("ix_appointments_status"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_date"), table_name="appointments")
    op.drop_table("appointments")
    booking_source.drop(op.get_bind(), checkfirst=True)
    appointment_status.drop(op.get_bind(), checkfirst=True)

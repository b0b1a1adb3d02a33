from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Statuses that occupy a slot's capacity
ACTIVE_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.IN_PROGRESS)


class BookingSource(str, Enum):
    STAFF = "STAFF"
    PORTAL = "PORTAL"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_date_start_time", "date", "start_time"),)

    id: int | None = Field(default=None, primary_key=True)
    # Calendar date stored as naive UTC noon
    date: datetime = Field(index=True)
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True)
    source: BookingSource = Field(default=BookingSource.STAFF)
    created_at: datetime = Field(default_factory=_utc_naive_now)

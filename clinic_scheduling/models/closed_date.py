from datetime import datetime

from sqlmodel import Field, SQLModel


class ClosedDate(SQLModel, table=True):
    """A whole day the clinic does not take bookings (holiday, maintenance)."""

    __tablename__ = "closed_dates"
    id: int | None = Field(default=None, primary_key=True)
    # Naive UTC noon, same convention as Appointment.date
    date: datetime = Field(unique=True, index=True)
    reason: str | None = None

from datetime import date

from pydantic import BaseModel, ConfigDict


class SchedulePreference(BaseModel):
    """Recurring template: one weekday (0=Sunday..6=Saturday) at one HH:mm time."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int
    time: str


class BulkSchedulingInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: date
    preferences: list[SchedulePreference]
    count: int
    package_duration: int  # minutes
    exclude_dates: frozenset[str] = frozenset()


class GeneratedSlot(BaseModel):
    date: date
    start_time: str
    end_time: str
    day_of_week: int
    preference_index: int
    has_conflict: bool = False
    conflict_count: int = 0


class ConflictInfo(BaseModel):
    date: str  # YYYY-MM-DD
    time: str
    count: int
    available: int


class SlotLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    staff: int
    portal: int


class StoredSlotLimits(BaseModel):
    """Limits as read from configuration storage; either may be unset."""

    staff: int | None = None
    portal: int | None = None


class BookingCount(BaseModel):
    date: date
    time: str
    count: int


class BookedInterval(BaseModel):
    start_time: str
    end_time: str


class SlotAvailability(BaseModel):
    time: str
    end_time: str
    total: int
    booked: int
    available: int


class AvailabilityResult(BaseModel):
    date: date
    is_closed: bool = False
    closed_reason: str | None = None
    slots: list[SlotAvailability] = []

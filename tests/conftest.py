"""Pytest configuration and in-memory fakes for the data-access Protocols."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from types import SimpleNamespace

import pytest

from clinic_scheduling.models.scheduling import BookedInterval, BookingCount, StoredSlotLimits
from clinic_scheduling.services.business_hours import BusinessHours
from clinic_scheduling.services.conflict_service import ConflictDetector
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider


@dataclass
class FakeBooking:
    date: date
    start_time: str
    end_time: str
    status: str = "SCHEDULED"


class FakeConfigStore:
    def __init__(self, limits: StoredSlotLimits | None = None) -> None:
        self.limits = limits
        self.calls = 0

    async def get_slot_limits(self) -> StoredSlotLimits | None:
        self.calls += 1
        return self.limits

    async def update_slot_limits(self, staff: int | None, portal: int | None) -> StoredSlotLimits:
        self.limits = StoredSlotLimits(staff=staff, portal=portal)
        return self.limits


@dataclass
class FakeBookingStore:
    bookings: list[FakeBooking] = field(default_factory=list)
    count_calls: list[tuple[list[date], list[str]]] = field(default_factory=list)

    def add(self, d: date, start: str, end: str, status: str = "SCHEDULED", times: int = 1) -> None:
        for _ in range(times):
            self.bookings.append(FakeBooking(d, start, end, status))

    def _active(self) -> list[FakeBooking]:
        return [b for b in self.bookings if b.status in ("SCHEDULED", "IN_PROGRESS")]

    async def count_active_by_date_time(self, dates, times) -> list[BookingCount]:
        self.count_calls.append((list(dates), list(times)))
        counter = Counter(
            (b.date, b.start_time) for b in self._active() if b.date in dates and b.start_time in times
        )
        return [BookingCount(date=d, time=t, count=n) for (d, t), n in counter.items()]

    async def list_active_on(self, d: date) -> list[BookedInterval]:
        return [BookedInterval(start_time=b.start_time, end_time=b.end_time) for b in self._active() if b.date == d]

    async def create(self, slot, source=None) -> SimpleNamespace:
        self.add(slot.date, slot.start_time, slot.end_time)
        return SimpleNamespace(id=len(self.bookings))


class FakeClosedDateStore:
    def __init__(self, closed: dict[date, str | None] | None = None) -> None:
        self.closed = closed or {}

    async def get_reason(self, d: date) -> tuple[bool, str | None]:
        if d in self.closed:
            return True, self.closed[d]
        return False, None

    async def list_from(self, d: date) -> set[date]:
        return {c for c in self.closed if c >= d}


@pytest.fixture
def booking_store() -> FakeBookingStore:
    return FakeBookingStore()


@pytest.fixture
def limit_provider() -> SlotLimitProvider:
    return SlotLimitProvider(FakeConfigStore(), default_staff=5, default_portal=2)


@pytest.fixture
def detector(booking_store: FakeBookingStore, limit_provider: SlotLimitProvider) -> ConflictDetector:
    return ConflictDetector(booking_store, limit_provider)


@pytest.fixture
def business_hours() -> BusinessHours:
    return BusinessHours(open_time="09:00", close_time="19:00", slot_minutes=30, closed_weekdays=frozenset({0}))

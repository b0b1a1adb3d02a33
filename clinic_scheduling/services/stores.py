"""Data access used by the scheduler.

The scheduling services only see the Protocols below; the Sql* classes implement
them over an AsyncSession that the request owns (commit/rollback happens in
`get_session`, never here).
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_scheduling.models.appointment import ACTIVE_STATUSES, Appointment, BookingSource
from clinic_scheduling.models.closed_date import ClosedDate
from clinic_scheduling.models.scheduling import BookedInterval, BookingCount, GeneratedSlot, StoredSlotLimits
from clinic_scheduling.models.system_settings import DEFAULT_SETTINGS_ID, SystemSettings
from clinic_scheduling.services.date_utils import end_of_day, from_instant, start_of_day, to_naive_utc_noon


class ConfigStore(Protocol):
    async def get_slot_limits(self) -> StoredSlotLimits | None: ...


class BookingStore(Protocol):
    async def count_active_by_date_time(self, dates: Sequence[date], times: Sequence[str]) -> list[BookingCount]: ...

    async def list_active_on(self, d: date) -> list[BookedInterval]: ...

    async def create(self, slot: GeneratedSlot, source: BookingSource = BookingSource.STAFF) -> Appointment: ...


class ClosedDateStore(Protocol):
    async def get_reason(self, d: date) -> tuple[bool, str | None]: ...

    async def list_from(self, d: date) -> set[date]: ...


def _naive(dt: datetime) -> datetime:
    return dt.astimezone(UTC).replace(tzinfo=None)


class SqlConfigStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_slot_limits(self) -> StoredSlotLimits | None:
        row = await self.session.get(SystemSettings, DEFAULT_SETTINGS_ID)
        if row is None:
            return None
        return StoredSlotLimits(staff=row.max_slots_staff, portal=row.max_slots_portal)

    async def update_slot_limits(self, staff: int | None, portal: int | None) -> StoredSlotLimits:
        row = await self.session.get(SystemSettings, DEFAULT_SETTINGS_ID)
        if row is None:
            row = SystemSettings(id=DEFAULT_SETTINGS_ID)
            self.session.add(row)
        row.max_slots_staff = staff
        row.max_slots_portal = portal
        row.updated_at = datetime.now(UTC).replace(tzinfo=None)
        await self.session.flush()
        return StoredSlotLimits(staff=row.max_slots_staff, portal=row.max_slots_portal)


class SqlBookingStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def count_active_by_date_time(self, dates: Sequence[date], times: Sequence[str]) -> list[BookingCount]:
        """One GROUP BY over (date, start_time) for every active booking in dates x times."""
        if not dates or not times:
            return []
        result = await self.session.execute(
            select(Appointment.date, Appointment.start_time, func.count(Appointment.id))
            .where(
                Appointment.date.in_([to_naive_utc_noon(d) for d in dates]),
                Appointment.start_time.in_(list(times)),
                Appointment.status.in_(ACTIVE_STATUSES),
            )
            .group_by(Appointment.date, Appointment.start_time)
        )
        return [BookingCount(date=from_instant(d), time=t, count=c) for d, t, c in result.all()]

    async def list_active_on(self, d: date) -> list[BookedInterval]:
        result = await self.session.execute(
            select(Appointment.start_time, Appointment.end_time).where(
                Appointment.date >= _naive(start_of_day(d)),
                Appointment.date <= _naive(end_of_day(d)),
                Appointment.status.in_(ACTIVE_STATUSES),
            )
        )
        return [BookedInterval(start_time=s, end_time=e) for s, e in result.all()]

    async def create(self, slot: GeneratedSlot, source: BookingSource = BookingSource.STAFF) -> Appointment:
        """Persist one accepted slot. Capacity is not enforced here."""
        appointment = Appointment(
            date=to_naive_utc_noon(slot.date),
            start_time=slot.start_time,
            end_time=slot.end_time,
            source=source,
        )
        self.session.add(appointment)
        await self.session.flush()
        await self.session.refresh(appointment)
        return appointment


class SqlClosedDateStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_reason(self, d: date) -> tuple[bool, str | None]:
        result = await self.session.execute(
            select(ClosedDate).where(
                ClosedDate.date >= _naive(start_of_day(d)),
                ClosedDate.date <= _naive(end_of_day(d)),
            )
        )
        closed = result.scalars().first()
        if closed is None:
            return False, None
        return True, closed.reason

    async def list_from(self, d: date) -> set[date]:
        result = await self.session.execute(
            select(ClosedDate.date).where(ClosedDate.date >= _naive(start_of_day(d)))
        )
        return {from_instant(row[0]) for row in result.all()}

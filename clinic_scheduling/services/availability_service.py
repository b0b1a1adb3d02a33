from datetime import date
from typing import Literal

from clinic_scheduling.models.scheduling import AvailabilityResult, SlotAvailability
from clinic_scheduling.services.business_hours import BusinessHours
from clinic_scheduling.services.date_utils import add_minutes, day_of_week, time_ranges_overlap
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider
from clinic_scheduling.services.stores import BookingStore, ClosedDateStore

Audience = Literal["staff", "portal"]


class AvailabilityCalculator:
    """Remaining capacity for every business-hours slot of one day.

    Does not reject past dates; that check belongs to the caller.
    """

    def __init__(
        self,
        booking_store: BookingStore,
        closed_date_store: ClosedDateStore,
        limit_provider: SlotLimitProvider,
        business_hours: BusinessHours,
    ) -> None:
        self.booking_store = booking_store
        self.closed_date_store = closed_date_store
        self.limit_provider = limit_provider
        self.business_hours = business_hours

    async def get_availability(self, d: date, audience: Audience = "staff") -> AvailabilityResult:
        closed, reason = await self.closed_date_store.get_reason(d)
        if closed:
            return AvailabilityResult(date=d, is_closed=True, closed_reason=reason)

        dow = day_of_week(d)
        if not self.business_hours.is_open_on(dow):
            return AvailabilityResult(date=d, is_closed=True, closed_reason="CLOSED_WEEKDAY")

        limits = await self.limit_provider.get_slot_limits()
        total = limits.staff if audience == "staff" else limits.portal
        booked = await self.booking_store.list_active_on(d)

        slots: list[SlotAvailability] = []
        for start in self.business_hours.time_slots_for(dow):
            end = add_minutes(start, self.business_hours.slot_minutes)
            n = sum(1 for b in booked if time_ranges_overlap(start, end, b.start_time, b.end_time))
            slots.append(
                SlotAvailability(time=start, end_time=end, total=total, booked=n, available=max(0, total - n))
            )
        return AvailabilityResult(date=d, slots=slots)

from dataclasses import dataclass

from clinic_scheduling.core.config import Settings
from clinic_scheduling.services.date_utils import minutes_to_time, time_to_minutes


@dataclass(frozen=True)
class BusinessHours:
    """Static opening hours: same window every open weekday, fixed slot step."""

    open_time: str
    close_time: str
    slot_minutes: int
    closed_weekdays: frozenset[int] = frozenset({0})

    @classmethod
    def from_settings(cls, s: Settings) -> "BusinessHours":
        return cls(
            open_time=s.business_open_time,
            close_time=s.business_close_time,
            slot_minutes=s.slot_duration_minutes,
            closed_weekdays=s.closed_weekdays,
        )

    def is_open_on(self, day_of_week: int) -> bool:
        return day_of_week not in self.closed_weekdays

    def time_slots_for(self, day_of_week: int) -> list[str]:
        """Slot start times offered on the weekday, ascending. Empty when closed."""
        if not self.is_open_on(day_of_week):
            return []
        current = time_to_minutes(self.open_time)
        end = time_to_minutes(self.close_time)
        slots: list[str] = []
        while current < end:
            slots.append(minutes_to_time(current))
            current += self.slot_minutes
        return slots

    def is_within(self, day_of_week: int, time: str) -> bool:
        if not self.is_open_on(day_of_week):
            return False
        t = time_to_minutes(time)
        return time_to_minutes(self.open_time) <= t < time_to_minutes(self.close_time)

    def latest_start(self) -> str:
        start = time_to_minutes(self.open_time)
        end = time_to_minutes(self.close_time)
        steps = (end - 1 - start) // self.slot_minutes
        return minutes_to_time(start + steps * self.slot_minutes)

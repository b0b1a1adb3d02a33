import logging
from collections.abc import Iterable
from datetime import date

from clinic_scheduling.models.scheduling import ConflictInfo
from clinic_scheduling.services.date_utils import format_date_key
from clinic_scheduling.services.slot_limit_service import SlotLimitProvider
from clinic_scheduling.services.stores import BookingStore

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Counts existing active bookings for (date, time) pairs in one batched query.

    The result is a snapshot for warnings only. A slot reported free can still be
    taken before the caller writes; capacity must be enforced where bookings are stored.
    """

    def __init__(self, booking_store: BookingStore, limit_provider: SlotLimitProvider) -> None:
        self.booking_store = booking_store
        self.limit_provider = limit_provider

    async def find_conflicts(self, dates: Iterable[date], times: Iterable[str]) -> list[ConflictInfo]:
        unique_dates = sorted(set(dates))
        unique_times = sorted(set(times))
        if not unique_dates or not unique_times:
            return []

        logger.debug("Checking conflicts for %d date(s) x %d time(s)", len(unique_dates), len(unique_times))
        counts = await self.booking_store.count_active_by_date_time(unique_dates, unique_times)
        limits = await self.limit_provider.get_slot_limits()

        conflicts = [
            ConflictInfo(
                date=format_date_key(row.date),
                time=row.time,
                count=row.count,
                available=max(0, limits.staff - row.count),
            )
            for row in counts
            if row.count > 0
        ]
        conflicts.sort(key=lambda c: (c.date, c.time))
        return conflicts

"""Bulk generation of recurring appointment slots from weekly preferences.

Generation is split in two: `generate_candidate_slots` is pure date arithmetic and
does no I/O; `BulkScheduleGenerator.generate` then annotates the candidates with
one batched conflict lookup.
"""

import logging
from collections.abc import Sequence
from datetime import date

from pydantic import BaseModel

from clinic_scheduling.core.exceptions import UnsatisfiableRequestError, ValidationError
from clinic_scheduling.models.scheduling import BulkSchedulingInput, GeneratedSlot, SchedulePreference
from clinic_scheduling.services.conflict_service import ConflictDetector
from clinic_scheduling.services.date_utils import (
    add_days,
    add_minutes,
    day_of_week,
    format_date_key,
    parse_date_key,
    validate_time_string,
)

logger = logging.getLogger(__name__)


def validate_bulk_input(data: BulkSchedulingInput) -> set[str]:
    """Raise ValidationError for unusable input; return normalized exclusion keys."""
    if not data.preferences:
        raise ValidationError("EMPTY_PREFERENCES", "At least one schedule preference is required")
    if data.count <= 0:
        raise ValidationError("INVALID_COUNT", "count must be greater than zero")
    if data.package_duration <= 0:
        raise ValidationError("INVALID_DURATION", "package_duration must be greater than zero")

    seen: set[tuple[int, str]] = set()
    for pref in data.preferences:
        if not 0 <= pref.day_of_week <= 6:
            raise ValidationError("INVALID_DAY_OF_WEEK", f"day_of_week must be 0-6, got {pref.day_of_week}")
        if not validate_time_string(pref.time):
            raise ValidationError("INVALID_TIME", f"Expected HH:mm, got {pref.time!r}")
        key = (pref.day_of_week, pref.time)
        if key in seen:
            raise ValidationError("DUPLICATE_PREFERENCE", f"Preference {pref.day_of_week} {pref.time} given twice")
        seen.add(key)
        # Sessions never cross midnight; raises END_TIME_PAST_MIDNIGHT
        add_minutes(pref.time, data.package_duration)

    return {format_date_key(parse_date_key(s)) for s in data.exclude_dates}


def scan_ceiling(count: int, excluded: int, max_scan_days: int | None = None) -> int:
    """Days to scan before giving up.

    Every week has at least one preferred day and each excluded date removes at most
    one of them, so this many days always suffice unless capped by max_scan_days.
    """
    days = 7 * (count + excluded + 1)
    if max_scan_days is not None:
        days = min(days, max_scan_days)
    return days


def generate_candidate_slots(data: BulkSchedulingInput, max_scan_days: int | None = None) -> list[GeneratedSlot]:
    """Walk forward from start_date emitting one slot per matching preference.

    Slots come out by date, then in the caller's preference order within a day
    (not by time of day).
    """
    excluded = validate_bulk_input(data)
    ceiling = scan_ceiling(data.count, len(excluded), max_scan_days)

    by_day: dict[int, list[tuple[int, SchedulePreference]]] = {}
    for index, pref in enumerate(data.preferences):
        by_day.setdefault(pref.day_of_week, []).append((index, pref))

    slots: list[GeneratedSlot] = []
    for offset in range(ceiling):
        current = add_days(data.start_date, offset)
        if format_date_key(current) in excluded:
            continue
        dow = day_of_week(current)
        for index, pref in by_day.get(dow, ()):
            slots.append(
                GeneratedSlot(
                    date=current,
                    start_time=pref.time,
                    end_time=add_minutes(pref.time, data.package_duration),
                    day_of_week=dow,
                    preference_index=index,
                )
            )
            if len(slots) == data.count:
                return slots

    logger.warning(
        "Bulk schedule unsatisfiable: %d of %d slot(s) within %d day(s) from %s",
        len(slots),
        data.count,
        ceiling,
        data.start_date,
    )
    raise UnsatisfiableRequestError(
        "CANNOT_SATISFY_REQUEST",
        f"Only {len(slots)} of {data.count} slots fit within {ceiling} days; relax preferences or exclusions",
    )


class BulkScheduleGenerator:
    def __init__(self, conflict_detector: ConflictDetector, max_scan_days: int | None = None) -> None:
        self.conflict_detector = conflict_detector
        self.max_scan_days = max_scan_days

    async def generate(self, data: BulkSchedulingInput) -> list[GeneratedSlot]:
        slots = generate_candidate_slots(data, self.max_scan_days)

        conflicts = await self.conflict_detector.find_conflicts(
            (s.date for s in slots),
            (s.start_time for s in slots),
        )
        counts = {(c.date, c.time): c.count for c in conflicts}
        for slot in slots:
            slot.conflict_count = counts.get((format_date_key(slot.date), slot.start_time), 0)
            slot.has_conflict = slot.conflict_count > 0

        logger.debug(
            "Generated %d slot(s) from %s, %d with conflicts",
            len(slots),
            data.start_date,
            sum(1 for s in slots if s.has_conflict),
        )
        return slots


class ScheduleSpan(BaseModel):
    weeks: int
    start_date: date | None = None
    end_date: date | None = None


def calculate_schedule_span(slots: Sequence[GeneratedSlot]) -> ScheduleSpan:
    if not slots:
        return ScheduleSpan(weeks=0)
    first, last = slots[0].date, slots[-1].date
    days = (last - first).days
    return ScheduleSpan(weeks=-(-days // 7), start_date=first, end_date=last)

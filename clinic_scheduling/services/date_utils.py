"""Timezone-safe date and time-of-day helpers.

Scheduling logic works on `datetime.date` values, which carry no time of day and
no zone, so adding days or comparing against "today" cannot shift across a local
midnight. Conversion to instants happens only at the persistence boundary, where
a calendar date is stored as 12:00:00 UTC on that day.

Times of day are "HH:mm" strings throughout.
"""

import re
from datetime import UTC, date, datetime, time, timedelta

from clinic_scheduling.core.exceptions import ValidationError

_DATE_KEY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")

MINUTES_PER_DAY = 24 * 60
_NOON = time(12, 0, 0)


def to_canonical_date(year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except (TypeError, ValueError) as e:
        raise ValidationError("INVALID_DATE", f"Invalid date {year}-{month}-{day}: {e}") from e


def to_utc_noon(d: date) -> datetime:
    """Instant at 12:00:00 UTC on the given calendar date."""
    return datetime.combine(d, _NOON, tzinfo=UTC)


def from_instant(dt: datetime) -> date:
    """UTC calendar date of an instant. Naive datetimes are taken as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.date()


def to_naive_utc_noon(d: date) -> datetime:
    """UTC noon as a naive datetime, for TIMESTAMP WITHOUT TIME ZONE columns."""
    return to_utc_noon(d).replace(tzinfo=None)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=UTC)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max, tzinfo=UTC)


def format_date_key(d: date) -> str:
    return d.isoformat()


def parse_date_key(s: str) -> date:
    """Parse a strict YYYY-MM-DD key. Anything else raises ValidationError."""
    if not isinstance(s, str) or not _DATE_KEY_RE.fullmatch(s):
        raise ValidationError("INVALID_DATE", f"Expected YYYY-MM-DD, got {s!r}")
    year, month, day = (int(p) for p in s.split("-"))
    return to_canonical_date(year, month, day)


def validate_time_string(s: str) -> bool:
    return isinstance(s, str) and _TIME_RE.fullmatch(s) is not None


def time_to_minutes(s: str) -> int:
    if not validate_time_string(s):
        raise ValidationError("INVALID_TIME", f"Expected HH:mm, got {s!r}")
    hours, minutes = s.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError("END_TIME_PAST_MIDNIGHT", f"{minutes} minutes is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(s: str, minutes: int) -> str:
    """Add minutes to an HH:mm time without rolling over to the next day."""
    total = time_to_minutes(s) + minutes
    if total >= MINUTES_PER_DAY:
        raise ValidationError(
            "END_TIME_PAST_MIDNIGHT",
            f"{s} plus {minutes} minutes ends after 23:59",
        )
    return minutes_to_time(total)


def time_ranges_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Half-open [start, end) overlap on HH:mm strings."""
    return time_to_minutes(start1) < time_to_minutes(end2) and time_to_minutes(start2) < time_to_minutes(end1)


def day_of_week(d: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def today_utc() -> date:
    return datetime.now(UTC).date()


def is_before_today(d: date, today: date | None = None) -> bool:
    return d < (today or today_utc())


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def parse_date_list(csv: str) -> list[date]:
    """Comma-separated YYYY-MM-DD keys; blank items are dropped."""
    return [parse_date_key(p.strip()) for p in csv.split(",") if p.strip()]


def parse_time_list(csv: str) -> list[str]:
    """Comma-separated HH:mm times; blank items are dropped."""
    times = [p.strip() for p in csv.split(",") if p.strip()]
    for t in times:
        if not validate_time_string(t):
            raise ValidationError("INVALID_TIME", f"Expected HH:mm, got {t!r}")
    return times

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from clinic_scheduling.core.exceptions import ValidationError
from clinic_scheduling.services.date_utils import (
    add_minutes,
    day_of_week,
    end_of_day,
    format_date_key,
    from_instant,
    is_before_today,
    parse_date_key,
    parse_date_list,
    parse_time_list,
    start_of_day,
    time_ranges_overlap,
    to_canonical_date,
    to_naive_utc_noon,
    to_utc_noon,
    validate_time_string,
)


class TestCanonicalDates:
    def test_to_canonical_date(self):
        assert to_canonical_date(2026, 1, 23) == date(2026, 1, 23)

    def test_to_canonical_date_rejects_impossible_day(self):
        with pytest.raises(ValidationError) as exc:
            to_canonical_date(2026, 2, 30)
        assert exc.value.code == "INVALID_DATE"

    def test_utc_noon(self):
        assert to_utc_noon(date(2026, 1, 23)) == datetime(2026, 1, 23, 12, 0, tzinfo=UTC)
        assert to_naive_utc_noon(date(2026, 1, 23)) == datetime(2026, 1, 23, 12, 0)

    def test_from_instant_uses_utc_day(self):
        # 22:00 in UTC-4 is already the next day in UTC
        late_evening = datetime(2026, 2, 5, 22, 0, tzinfo=timezone(timedelta(hours=-4)))
        assert from_instant(late_evening) == date(2026, 2, 6)
        assert from_instant(datetime(2026, 2, 5, 23, 59)) == date(2026, 2, 5)

    def test_noon_survives_any_offset(self):
        noon = to_utc_noon(date(2026, 1, 23))
        for hours in (-12, -4, 0, 5, 14):
            local = noon.astimezone(timezone(timedelta(hours=hours)))
            assert local.date() == date(2026, 1, 23)

    def test_day_boundaries(self):
        d = date(2026, 1, 23)
        assert start_of_day(d) == datetime(2026, 1, 23, 0, 0, tzinfo=UTC)
        assert end_of_day(d) == datetime(2026, 1, 23, 23, 59, 59, 999999, tzinfo=UTC)
        assert start_of_day(d) < to_utc_noon(d) < end_of_day(d)

    def test_day_of_week_sunday_is_zero(self):
        assert day_of_week(date(2026, 1, 4)) == 0
        assert day_of_week(date(2026, 1, 5)) == 1
        assert day_of_week(date(2026, 1, 10)) == 6

    def test_is_before_today(self):
        today = date(2026, 3, 1)
        assert is_before_today(date(2026, 2, 28), today=today)
        assert not is_before_today(today, today=today)
        assert not is_before_today(date(2026, 3, 2), today=today)


class TestDateKeys:
    @pytest.mark.parametrize("key", ["2026-01-23", "2024-02-29", "1999-12-31"])
    def test_round_trip(self, key):
        assert format_date_key(parse_date_key(key)) == key

    @pytest.mark.parametrize(
        "key",
        [
            "2026-1-23",
            "2026/01/23",
            "23-01-2026",
            "2026-02-30",
            "2026-13-01",
            "",
            "2026-01-23T12:00:00Z",
            "abcd-ef-gh",
            "2026-01-23\n",
            "٢٠٢٦-01-23",
        ],
    )
    def test_invalid_keys_raise_validation_error(self, key):
        with pytest.raises(ValidationError):
            parse_date_key(key)

    def test_parse_date_list_drops_blanks(self):
        assert parse_date_list("2026-01-05, ,2026-01-06,") == [date(2026, 1, 5), date(2026, 1, 6)]

    def test_parse_date_list_rejects_garbage(self):
        with pytest.raises(ValidationError):
            parse_date_list("2026-01-05,tomorrow")


class TestTimes:
    @pytest.mark.parametrize("value", ["00:00", "09:30", "19:59", "23:59"])
    def test_valid_times(self, value):
        assert validate_time_string(value)

    @pytest.mark.parametrize(
        "value", ["9:30", "24:00", "12:60", "12:5", "1230", " 12:30", "12:30:00", "", "12:30\n", "١٢:30"]
    )
    def test_invalid_times(self, value):
        assert not validate_time_string(value)

    def test_add_minutes_rolls_hours(self):
        assert add_minutes("09:45", 30) == "10:15"
        assert add_minutes("10:00", 90) == "11:30"
        assert add_minutes("23:00", 59) == "23:59"

    def test_add_minutes_never_rolls_into_next_day(self):
        with pytest.raises(ValidationError) as exc:
            add_minutes("23:30", 45)
        assert exc.value.code == "END_TIME_PAST_MIDNIGHT"

    def test_overlap_is_half_open(self):
        assert time_ranges_overlap("09:00", "10:00", "09:30", "10:30")
        assert not time_ranges_overlap("09:00", "09:30", "09:30", "10:00")

    def test_parse_time_list(self):
        assert parse_time_list("09:00,10:30") == ["09:00", "10:30"]
        with pytest.raises(ValidationError):
            parse_time_list("09:00,25:00")

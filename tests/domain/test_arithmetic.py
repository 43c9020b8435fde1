"""Tests for timestamp truncation, stepping and counting."""

from datetime import datetime, timedelta

import pytest

from calinterval.domain import arithmetic
from calinterval.domain.precision import (
    BUILTIN_PRECISIONS,
    DAY,
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    MONTH,
    SECOND,
    YEAR,
    Precision,
    microsecond,
)
from calinterval.errors import InvalidPrecisionError, TimestampRangeError

TS = datetime(2018, 2, 3, 10, 20, 30, 123456)


class TestTruncate:
    @pytest.mark.parametrize(
        ("precision", "expected"),
        [
            (YEAR, datetime(2018, 1, 1)),
            (MONTH, datetime(2018, 2, 1)),
            (DAY, datetime(2018, 2, 3)),
            (HOUR, datetime(2018, 2, 3, 10)),
            (MINUTE, datetime(2018, 2, 3, 10, 20)),
            (SECOND, datetime(2018, 2, 3, 10, 20, 30)),
            (microsecond(1), datetime(2018, 2, 3, 10, 20, 30, 100000)),
            (MILLISECOND, datetime(2018, 2, 3, 10, 20, 30, 123000)),
            (MICROSECOND, TS),
        ],
    )
    def test_truncate(self, precision: Precision, expected: datetime) -> None:
        assert arithmetic.truncate(TS, precision) == expected

    def test_idempotent(self) -> None:
        for precision in BUILTIN_PRECISIONS:
            once = arithmetic.truncate(TS, precision)
            assert arithmetic.truncate(once, precision) == once

    def test_unknown_precision(self) -> None:
        with pytest.raises(InvalidPrecisionError):
            arithmetic.truncate(TS, Precision("fortnight"))


class TestStepping:
    def test_month_carries_into_next_year(self) -> None:
        assert arithmetic.next_timestamp(datetime(2018, 11, 1), MONTH, 3) == datetime(2019, 2, 1)

    def test_month_clamps_day(self) -> None:
        assert arithmetic.next_timestamp(datetime(2018, 1, 31), MONTH, 1) == datetime(2018, 2, 28)
        assert arithmetic.next_timestamp(datetime(2016, 1, 31), MONTH, 1) == datetime(2016, 2, 29)

    def test_year_from_leap_day(self) -> None:
        assert arithmetic.next_timestamp(datetime(2016, 2, 29), YEAR, 1) == datetime(2017, 2, 28)

    def test_prev_month_any_step(self) -> None:
        assert arithmetic.prev_timestamp(datetime(2018, 3, 1), MONTH, 14) == datetime(2017, 1, 1)

    def test_fixed_length_units(self) -> None:
        assert arithmetic.next_timestamp(TS, DAY, 2) == TS + timedelta(days=2)
        assert arithmetic.next_timestamp(TS, MILLISECOND, 1) == TS + timedelta(milliseconds=1)
        assert arithmetic.prev_timestamp(TS, MICROSECOND, 1) == TS - arithmetic.TICK

    def test_zero_step_is_identity(self) -> None:
        for precision in BUILTIN_PRECISIONS:
            assert arithmetic.next_timestamp(TS, precision, 0) == TS

    def test_month_past_last_year(self) -> None:
        with pytest.raises(TimestampRangeError):
            arithmetic.next_timestamp(datetime(9999, 12, 1), MONTH, 1)

    def test_year_before_first_year(self) -> None:
        with pytest.raises(TimestampRangeError):
            arithmetic.prev_timestamp(datetime(1, 6, 1), YEAR, 1)

    def test_fixed_length_past_max(self) -> None:
        with pytest.raises(TimestampRangeError):
            arithmetic.next_timestamp(datetime.max, MICROSECOND, 1)

    def test_calendar_units_have_no_fixed_length(self) -> None:
        with pytest.raises(InvalidPrecisionError):
            arithmetic.unit_length(MONTH)


class TestCount:
    def test_years(self) -> None:
        assert arithmetic.count(datetime(2018, 1, 1), datetime(2019, 12, 31), YEAR) == 2

    def test_months_across_years(self) -> None:
        first = datetime(2018, 11, 1)
        last = datetime(2019, 2, 28, 23, 59, 59, 999999)
        assert arithmetic.count(first, last, MONTH) == 4

    def test_days_in_leap_year(self) -> None:
        last = datetime(2016, 12, 31, 23, 59, 59, 999999)
        assert arithmetic.count(datetime(2016, 1, 1), last, DAY) == 366

    def test_single_tick(self) -> None:
        assert arithmetic.count(TS, TS, MICROSECOND) == 1

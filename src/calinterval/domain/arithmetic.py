"""Timestamp arithmetic: truncate, step and count over naive datetimes.

Years and months step by calendar fields because their length varies.
Every finer precision reduces to a fixed multiple of the minimal tick.
"""

from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, datetime, timedelta

from calinterval.domain.precision import Precision
from calinterval.errors import InvalidPrecisionError, TimestampRangeError

TICK = timedelta(microseconds=1)

_FIXED_LENGTHS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "hour": timedelta(hours=1),
    "minute": timedelta(minutes=1),
    "second": timedelta(seconds=1),
}

_TIME_FIELDS = ("hour", "minute", "second", "microsecond")

# Fields zeroed (or reset to 1) when truncating to each calendar precision.
_RESETS: dict[str, dict[str, int]] = {
    "year": {"month": 1, "day": 1, **dict.fromkeys(_TIME_FIELDS, 0)},
    "month": {"day": 1, **dict.fromkeys(_TIME_FIELDS, 0)},
    "day": dict.fromkeys(_TIME_FIELDS, 0),
    "hour": dict.fromkeys(_TIME_FIELDS[1:], 0),
    "minute": dict.fromkeys(_TIME_FIELDS[2:], 0),
    "second": {"microsecond": 0},
}


def unit_length(precision: Precision) -> timedelta:
    """Fixed length of one *precision* unit (day and finer)."""
    if precision.name == "microsecond" and precision.scale is not None:
        return timedelta(microseconds=10 ** (6 - precision.scale))
    try:
        return _FIXED_LENGTHS[precision.name]
    except KeyError:
        msg = f"Precision {precision} has no fixed unit length"
        raise InvalidPrecisionError(msg) from None


def shift_months(ts: datetime, months: int) -> datetime:
    """Move *ts* by *months* calendar months, carrying across year boundaries.

    The day is clamped to the target month's length (Jan 31 + 1 -> Feb 28).
    """
    if months == 0:
        return ts
    year, month0 = divmod(ts.year * 12 + ts.month - 1 + months, 12)
    if not MINYEAR <= year <= MAXYEAR:
        msg = f"Shifting {ts} by {months} months leaves the supported year range"
        raise TimestampRangeError(msg)
    month = month0 + 1
    day = min(ts.day, calendar.monthrange(year, month)[1])
    return ts.replace(year=year, month=month, day=day)


def truncate(ts: datetime, precision: Precision) -> datetime:
    """Zero out every field finer than *precision*."""
    if precision.name == "microsecond" and precision.scale is not None:
        n = 10 ** (6 - precision.scale)
        return ts.replace(microsecond=ts.microsecond // n * n)
    try:
        resets = _RESETS[precision.name]
    except KeyError:
        msg = f"Cannot truncate to precision {precision}"
        raise InvalidPrecisionError(msg) from None
    return ts.replace(**resets)


def next_timestamp(ts: datetime, precision: Precision, step: int) -> datetime:
    """Move *ts* forward by *step* whole *precision* units (negative moves back)."""
    if step == 0:
        return ts
    if precision.name == "year":
        return shift_months(ts, 12 * step)
    if precision.name == "month":
        return shift_months(ts, step)
    length = unit_length(precision)
    try:
        return ts + length * step
    except OverflowError as exc:
        msg = f"Stepping {ts} by {step} x {precision} leaves the supported range"
        raise TimestampRangeError(msg) from exc


def prev_timestamp(ts: datetime, precision: Precision, step: int) -> datetime:
    """Move *ts* backward by *step* whole *precision* units."""
    return next_timestamp(ts, precision, -step)


def count(first: datetime, last: datetime, precision: Precision) -> int:
    """Number of whole *precision* units spanned by ``[first, last]``, inclusive."""
    if precision.name == "year":
        return last.year - first.year + 1
    if precision.name == "month":
        return (last.year * 12 + last.month) - (first.year * 12 + first.month) + 1
    return (last - first) // unit_length(precision) + 1

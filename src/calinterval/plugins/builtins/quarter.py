"""Quarter precision: three-month blocks between year and month.

Textual shape ``YYYYQn`` (n in 1..4); a span within one year packs as
``2019Q1/Q3``. Not enabled by default: register :class:`QuarterPlugin` with
a :class:`~calinterval.plugins.manager.PluginManager`, or pass
:func:`register` as a registry modifier.
"""

from __future__ import annotations

import re
from datetime import datetime

import pluggy

from calinterval.domain import arithmetic
from calinterval.domain.precision import YEAR, Precision
from calinterval.domain.registry import PrecisionEntry
from calinterval.domain.units import PrecisionUnit
from calinterval.errors import UnregisteredPrecisionError

hookimpl = pluggy.HookimplMarker("calinterval")


QUARTER = Precision("quarter")

_QUARTER_PATTERN = re.compile(r"^(\d{4})Q([1-4])$", re.ASCII)
_MONTHS_PER_QUARTER = 3


def _quarter_index(ts: datetime) -> int:
    return ts.year * 4 + (ts.month - 1) // _MONTHS_PER_QUARTER


class QuarterUnit(PrecisionUnit):
    """Capability record for :data:`QUARTER`."""

    def precisions(self) -> list[Precision]:
        return [QUARTER]

    def to_iso(self, string: str) -> tuple[Precision, str] | None:
        match = _QUARTER_PATTERN.match(string)
        if match is None:
            return None
        year, quarter = match.groups()
        month = (int(quarter) - 1) * _MONTHS_PER_QUARTER + 1
        return QUARTER, f"{year}-{month:02d}-01 00:00:00.000000"

    def format(self, ts: datetime, precision: Precision) -> str:
        if precision != QUARTER:
            msg = f"Quarter unit does not serve precision {precision}"
            raise UnregisteredPrecisionError(msg)
        return f"{ts.year:04d}Q{(ts.month - 1) // _MONTHS_PER_QUARTER + 1}"

    def format_left_right(self, left: str, right: str) -> str | None:
        left_match = _QUARTER_PATTERN.match(left)
        right_match = _QUARTER_PATTERN.match(right)
        if left_match is None or right_match is None:
            return None
        if left_match.group(1) != right_match.group(1):
            return None
        return f"{left}/Q{right_match.group(2)}"

    def count(self, first: datetime, last: datetime, precision: Precision) -> int:
        return _quarter_index(last) - _quarter_index(first) + 1

    def next_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        return arithmetic.shift_months(ts, _MONTHS_PER_QUARTER * step)

    def prev_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        return arithmetic.shift_months(ts, -_MONTHS_PER_QUARTER * step)

    def truncate(self, ts: datetime, precision: Precision) -> datetime:
        month = (ts.month - 1) // _MONTHS_PER_QUARTER * _MONTHS_PER_QUARTER + 1
        return datetime(ts.year, month, 1)

    def __repr__(self) -> str:
        return "QuarterUnit()"


def register(entries: list[PrecisionEntry]) -> list[PrecisionEntry]:
    """Precision modifier inserting ``quarter`` right after ``year``.

    Idempotent: a list that already holds ``quarter`` is returned unchanged.
    """
    if any(precision == QUARTER for precision, _ in entries):
        return entries
    position = next(
        (index + 1 for index, (precision, _) in enumerate(entries) if precision == YEAR),
        0,
    )
    return [*entries[:position], (QUARTER, QuarterUnit()), *entries[position:]]


class QuarterPlugin:
    """Pluggy plugin enabling the quarter precision."""

    @hookimpl
    def modify_precisions(self, entries: list[PrecisionEntry]) -> list[PrecisionEntry]:
        return register(entries)

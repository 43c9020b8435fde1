"""Interval value type — ``(first, last, precision)`` and its constructors.

An interval is a whole number of precision units. ``last`` is always the
tick before the start of the unit following the interval, so a month
interval ends at ``...-31 23:59:59.999999`` (or the 28th/29th/30th).

Intervals are immutable; every operation returns a new value. Equality is an
exact match of all three fields, so equal spans at different precisions are
distinct intervals.

Also behaves as a finite, restartable collection of its 1-unit intervals::

    >>> quarter = Interval.parse("2018-01/03")
    >>> [str(month) for month in quarter]
    ['2018-01', '2018-02', '2018-03']
    >>> len(Interval.parse("2016-01-01/12-31"))
    366
"""

from __future__ import annotations

import functools
import operator
from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time

from calinterval.domain.codec import format_bounds, parse_boundaries
from calinterval.domain.precision import FINEST, MICROSECOND, Precision
from calinterval.domain.registry import PrecisionRegistry, get_registry
from calinterval.domain.units import canonical
from calinterval.errors import (
    DescendingIntervalError,
    InvalidPrecisionError,
    PrecisionMismatchError,
    TimestampRangeError,
    UnregisteredPrecisionError,
)


@functools.total_ordering
@dataclass(frozen=True, repr=False)
class Interval:
    """A contiguous span of calendar time at a given precision.

    Attributes:
        first: First microsecond of the interval.
        last: Last microsecond of the interval (inclusive).
        precision: Granularity used for counting, stepping and rendering.

    Raises:
        DescendingIntervalError: If *first* is after *last*.
        InvalidPrecisionError: If *precision* is unregistered or the boundaries
            do not start and end whole units of it.
    """

    first: datetime
    last: datetime
    precision: Precision

    def __post_init__(self) -> None:
        if self.first > self.last:
            msg = (
                f"Cannot create interval from {canonical(self.first)} and "
                f"{canonical(self.last)}, descending intervals are not supported"
            )
            raise DescendingIntervalError(msg)
        _check_alignment(self.first, self.last, self.precision, get_registry())

    # ── constructors ─────────────────────────────────────────────────

    @classmethod
    def new(cls, value: datetime | date, precision: Precision) -> Interval:
        """Return the 1-unit interval at *precision* containing *value*.

        A ``date`` is read as midnight.

        Raises:
            InvalidPrecisionError: If *precision* is not registered.
        """
        registry = get_registry()
        registry.require(precision)
        first = registry.truncate(to_datetime(value), precision)
        return cls(first, _unit_end(first, precision, 1, registry), precision)

    @classmethod
    def now(cls, precision: Precision = MICROSECOND) -> Interval:
        """The interval at *precision* containing the current UTC instant."""
        return cls.new(datetime.now(UTC).replace(tzinfo=None), precision)

    @classmethod
    def parse(cls, string: str) -> Interval:
        """Parse interval text such as ``"2018-06-15"`` or ``"2018-01/02"``.

        Raises:
            ParseError: If *string* does not follow the interval grammar.
            DescendingIntervalError: If the right boundary precedes the left.
        """
        bounds = parse_boundaries(string, get_registry())
        left = cls.new(*bounds[0])
        if len(bounds) == 1:
            return left
        right = cls.new(*bounds[1])
        return cls(left.first, right.last, left.precision)

    # ── units ────────────────────────────────────────────────────────

    def count(self) -> int:
        """Number of whole precision units in the interval."""
        return get_registry().count(self.first, self.last, self.precision)

    def first_unit(self) -> Interval:
        """The 1-unit interval at the start, e.g. ``2018-01`` for ``2018-01/12``."""
        return Interval.new(self.first, self.precision)

    def last_unit(self) -> Interval:
        """The 1-unit interval at the end, e.g. ``2018-12`` for ``2018-01/12``."""
        return Interval.new(self.last, self.precision)

    # ── stepping ─────────────────────────────────────────────────────

    def next(self, step: int = 1) -> Interval:
        """Move forward by *step* intervals of this length.

        ``2018-01/02`` steps to ``2018-03/04``: blocks of two months.
        """
        _check_step(step)
        if step == 0:
            return self
        registry = get_registry()
        size = self.count()
        start = registry.next_timestamp(self.last, FINEST, 1)
        first = registry.next_timestamp(start, self.precision, size * (step - 1))
        return Interval(first, _unit_end(first, self.precision, size, registry), self.precision)

    def prev(self, step: int = 1) -> Interval:
        """Move backward by *step* intervals of this length."""
        _check_step(step)
        if step == 0:
            return self
        registry = get_registry()
        size = self.count()
        first = registry.prev_timestamp(self.first, self.precision, size * step)
        return Interval(first, _unit_end(first, self.precision, size, registry), self.precision)

    # ── re-precisioning ──────────────────────────────────────────────

    def nest(self, precision: Precision) -> Interval:
        """Same boundaries at a strictly finer *precision*.

        Raises:
            InvalidPrecisionError: If *precision* is unregistered or not finer.
        """
        registry = get_registry()
        registry.require(precision)
        if registry.compare(precision, self.precision) != "gt":
            msg = f"Cannot nest from {self.precision} to {precision}"
            raise InvalidPrecisionError(msg)
        return replace(self, precision=precision)

    def enclosing(self, precision: Precision) -> Interval:
        """The 1-unit interval at a strictly coarser *precision* containing ``first``.

        Raises:
            InvalidPrecisionError: If *precision* is unregistered or not coarser.
        """
        registry = get_registry()
        registry.require(precision)
        if registry.compare(precision, self.precision) != "lt":
            msg = f"Cannot enclose from {self.precision} to {precision}"
            raise InvalidPrecisionError(msg)
        return Interval.new(self.first, precision)

    # ── collection protocol ──────────────────────────────────────────

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Interval]:
        current = self.first_unit()
        for index in range(self.count()):
            if index:
                current = current.next()
            yield current

    def __getitem__(self, key: int | slice) -> Interval | list[Interval]:
        if isinstance(key, slice):
            return [self._unit_at(i) for i in range(self.count())[key]]
        index = operator.index(key)
        size = self.count()
        if index < 0:
            index += size
        if not 0 <= index < size:
            msg = "interval index out of range"
            raise IndexError(msg)
        return self._unit_at(index)

    def _unit_at(self, index: int) -> Interval:
        return self.first_unit().next(index)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Interval):
            return self.first <= item.first and item.last <= self.last
        if isinstance(item, date):
            ts = to_datetime(item)
            return self.first <= ts <= self.last
        msg = f"Membership test needs an Interval, datetime or date; got {type(item).__name__}"
        raise TypeError(msg)

    # ── ordering / text ──────────────────────────────────────────────

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        require_same_precision(self, other)
        return (self.first, self.last) < (other.first, other.last)

    def __str__(self) -> str:
        return format_bounds(self.first, self.last, self.precision, get_registry())

    def __repr__(self) -> str:
        try:
            return f"Interval({str(self)!r})"
        except UnregisteredPrecisionError:
            return (
                f"Interval(first={self.first!r}, last={self.last!r}, "
                f"precision={self.precision!r})"
            )


def to_datetime(value: datetime | date) -> datetime:
    """Coerce a naive ``datetime`` or a ``date`` (at midnight) to a naive datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            msg = "Time zone aware datetimes are not supported"
            raise TypeError(msg)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    msg = f"Expected a datetime or date; got {type(value).__name__}"
    raise TypeError(msg)


def require_same_precision(a: Interval, b: Interval) -> Precision:
    """Return the shared precision of *a* and *b*, or raise."""
    if a.precision != b.precision:
        msg = f"Intervals must share a precision; got {a.precision} and {b.precision}"
        raise PrecisionMismatchError(msg)
    return a.precision


def _unit_end(
    first: datetime,
    precision: Precision,
    size: int,
    registry: PrecisionRegistry,
) -> datetime:
    """Last tick of the *size*-unit interval starting at *first*.

    The final unit of the calendar ends at ``datetime.max``.
    """
    last_start = registry.next_timestamp(first, precision, size - 1)
    try:
        start_of_next = registry.next_timestamp(last_start, precision, 1)
    except TimestampRangeError:
        return datetime.max
    return registry.prev_timestamp(start_of_next, FINEST, 1)


def _check_alignment(
    first: datetime,
    last: datetime,
    precision: Precision,
    registry: PrecisionRegistry,
) -> None:
    """Require *first* to start a *precision* unit and *last* to end one."""
    registry.require(precision)
    if registry.truncate(first, precision) != first:
        msg = f"{canonical(first)} does not start a {precision} unit"
        raise InvalidPrecisionError(msg)
    if last == datetime.max:
        return
    after = registry.next_timestamp(last, FINEST, 1)
    if registry.truncate(after, precision) != after:
        msg = f"{canonical(last)} does not end a {precision} unit"
        raise InvalidPrecisionError(msg)


def _check_step(step: int) -> None:
    if step < 0:
        msg = f"Step must be >= 0; got {step} (use prev() to step backward)"
        raise ValueError(msg)

"""Interval algebra — Allen relations and set operations on equal-precision intervals.

Relation between *a* and *b* (Allen's Interval Algebra)::

    a precedes b      | aaaa
                      |       bbbb
    a meets b         | aaaa
                      |     bbbb
    a overlaps b      | aaaa
                      |   bbbb
    a finished by b   | aaaa
                      |   bb
    a contains b      | aaaaaa
                      |   bb
    a starts b        |  aa
                      |  bbbb
    a equals b        | aaaa
                      | bbbb
    a started by b    | aaaa
                      | bb
    a during b        |   aa
                      | bbbbbb
    a finishes b      |   aa
                      | bbbb
    a overlapped by b |   aaaa
                      | bbbb
    a met by b        |     aaaa
                      | bbbb
    a preceded by b   |       aaaa
                      | bbbb

INVARIANT: every binary operation requires equal precision and raises
PrecisionMismatchError otherwise.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from calinterval.domain.arithmetic import unit_length
from calinterval.domain.interval import Interval, require_same_precision
from calinterval.domain.precision import FINEST

# Two intervals are adjacent when one ends exactly one tick before the other starts.
_TICK = unit_length(FINEST)


class Relation(StrEnum):
    """The 13 mutually exclusive relations between two intervals."""

    EQUAL = "equal"
    MEETS = "meets"
    MET_BY = "met_by"
    PRECEDS = "preceds"
    PRECEDED_BY = "preceded_by"
    STARTS = "starts"
    STARTED_BY = "started_by"
    FINISHES = "finishes"
    FINISHED_BY = "finished_by"
    DURING = "during"
    CONTAINS = "contains"
    OVERLAPS = "overlaps"
    OVERLAPPED_BY = "overlapped_by"

    # Alias with the conventional spelling.
    PRECEDES = "preceds"

    @property
    def converse(self) -> Relation:
        """The relation of *b* to *a* when this is the relation of *a* to *b*."""
        return _CONVERSES[self]


_CONVERSES: dict[Relation, Relation] = {
    Relation.EQUAL: Relation.EQUAL,
    Relation.MEETS: Relation.MET_BY,
    Relation.MET_BY: Relation.MEETS,
    Relation.PRECEDS: Relation.PRECEDED_BY,
    Relation.PRECEDED_BY: Relation.PRECEDS,
    Relation.STARTS: Relation.STARTED_BY,
    Relation.STARTED_BY: Relation.STARTS,
    Relation.FINISHES: Relation.FINISHED_BY,
    Relation.FINISHED_BY: Relation.FINISHES,
    Relation.DURING: Relation.CONTAINS,
    Relation.CONTAINS: Relation.DURING,
    Relation.OVERLAPS: Relation.OVERLAPPED_BY,
    Relation.OVERLAPPED_BY: Relation.OVERLAPS,
}


def _meets(a: Interval, b: Interval) -> bool:
    return b.first - a.last == _TICK


def relation(a: Interval, b: Interval) -> Relation:
    """Classify how *a* relates to *b*.

    Checked in a fixed order so that boundary-touching cases are judged once:
    equality, adjacency, strict precedence, shared boundaries, strict
    containment, then true overlap.

    Examples:
        >>> relation(Interval.parse("2018-01/02"), Interval.parse("2018-06"))
        <Relation.PRECEDS: 'preceds'>
        >>> relation(Interval.parse("2018-01/02"), Interval.parse("2018-03"))
        <Relation.MEETS: 'meets'>
    """
    require_same_precision(a, b)

    if a == b:
        return Relation.EQUAL
    if _meets(a, b):
        return Relation.MEETS
    if _meets(b, a):
        return Relation.MET_BY
    if a.last < b.first:
        return Relation.PRECEDS
    if a.first > b.last:
        return Relation.PRECEDED_BY
    if a.first == b.first:
        return Relation.STARTS if a.last < b.last else Relation.STARTED_BY
    if a.last == b.last:
        return Relation.FINISHES if a.first > b.first else Relation.FINISHED_BY
    if a.first > b.first and a.last < b.last:
        return Relation.DURING
    if a.first < b.first and a.last > b.last:
        return Relation.CONTAINS
    # Boundaries all differ and the intervals share at least one tick.
    if a.first < b.first:
        return Relation.OVERLAPS
    return Relation.OVERLAPPED_BY


def intersection(a: Interval, b: Interval) -> Interval | None:
    """The overlap of *a* and *b*, or None if they share no tick."""
    precision = require_same_precision(a, b)
    if a.first <= b.last and a.last >= b.first:
        return Interval(max(a.first, b.first), min(a.last, b.last), precision)
    return None


def union(a: Interval, b: Interval) -> Interval | None:
    """The interval spanning *a* and *b* if they overlap or touch, else None."""
    precision = require_same_precision(a, b)
    if intersection(a, b) is None and not _meets(a, b) and not _meets(b, a):
        return None
    return Interval(min(a.first, b.first), max(a.last, b.last), precision)


def split(
    outer: Interval,
    inner: Interval,
) -> Interval | tuple[Interval, Interval] | tuple[Interval, Interval, Interval]:
    """Partition *outer* around *inner*.

    Returns ``(before, inner, after)`` when *inner* lies strictly inside,
    ``(inner, after)`` when it starts *outer*, ``(before, inner)`` when it
    finishes *outer*, and *outer* unchanged for every other relation.
    """
    precision = require_same_precision(outer, inner)
    rel = relation(inner, outer)
    if rel is Relation.DURING:
        before = Interval(outer.first, inner.first - _TICK, precision)
        after = Interval(inner.last + _TICK, outer.last, precision)
        return before, inner, after
    if rel is Relation.STARTS:
        return inner, Interval(inner.last + _TICK, outer.last, precision)
    if rel is Relation.FINISHES:
        return Interval(outer.first, inner.first - _TICK, precision), inner
    return outer


def gaps(interval: Interval, events: Iterable[Interval]) -> list[Interval]:
    """Sub-intervals of *interval* not covered by any of *events*.

    Events are taken in chronological order and clipped to the part of
    *interval* still uncovered; events outside it are ignored.

    Examples:
        >>> day = Interval.parse("2018-01-01 00:00/23:59")
        >>> [str(g) for g in gaps(day, [Interval.parse("2018-01-01 09:00/10:00")])]
        ['2018-01-01 00:00/08:59', '2018-01-01 10:01/23:59']
    """
    found: list[Interval] = []
    remaining: Interval | None = interval
    for event in sorted(events, key=lambda e: (e.first, e.last)):
        require_same_precision(interval, event)
        if remaining is None:
            break
        clipped = intersection(remaining, event)
        if clipped is None:
            continue
        if clipped == remaining:
            remaining = None
            continue
        parts = split(remaining, clipped)
        rel = relation(clipped, remaining)
        if rel is Relation.DURING:
            found.append(parts[0])
            remaining = parts[2]
        elif rel is Relation.STARTS:
            remaining = parts[1]
        else:
            found.append(parts[0])
            remaining = None
    if remaining is not None:
        found.append(remaining)
    return found

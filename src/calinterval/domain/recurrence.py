"""Simple-stepping recurrence over intervals."""

from __future__ import annotations

from collections.abc import Iterator

from calinterval.domain.algebra import Relation, relation
from calinterval.domain.interval import Interval

# Relations to ``until`` under which the recurrence keeps going.
_CONTINUING = frozenset({Relation.PRECEDS, Relation.MEETS, Relation.EQUAL})


def recur(
    start: Interval,
    *,
    until: Interval | None = None,
    count: int | None = None,
    step: int = 1,
) -> Iterator[Interval]:
    """Yield *start*, ``start.next(step)``, ``start.next(2 * step)``, ...

    Stops at the first interval that is not before, adjacent to, or equal to
    *until*, or once *count* intervals have been produced. With neither bound
    the sequence is infinite.

    Examples:
        >>> [str(i) for i in recur(Interval.parse("2018-01"), count=3, step=2)]
        ['2018-01', '2018-03', '2018-05']

    Raises:
        ValueError: If *step* is not positive or *count* is negative.
        PrecisionMismatchError: If *until* has a different precision.
    """
    if step < 1:
        msg = f"Recurrence step must be >= 1; got {step}"
        raise ValueError(msg)
    if count is not None and count < 0:
        msg = f"Recurrence count must be >= 0; got {count}"
        raise ValueError(msg)

    current = start
    produced = 0
    while count is None or produced < count:
        if until is not None and relation(current, until) not in _CONTINUING:
            return
        yield current
        produced += 1
        current = current.next(step)

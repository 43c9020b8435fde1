"""Interval text: boundaries to and from their compact notation.

Grammar::

    Interval := Boundary ["/" BoundarySuffix]
    Boundary := Year ["-" Month ["-" Day [" " Hour [":" Minute [":" Second ["." Fraction]]]]]]

A ``BoundarySuffix`` reuses the left boundary's leading characters, so
``"2018-01/02"`` reads as ``"2018-01"`` to ``"2018-02"``.

INVARIANT: ``format_bounds`` and ``parse_boundaries`` round-trip exactly for
every interval the constructors can produce.
"""

from __future__ import annotations

from datetime import datetime

from calinterval.domain.precision import Precision
from calinterval.domain.registry import PrecisionRegistry
from calinterval.domain.units import from_canonical
from calinterval.errors import ParseError


def format_bounds(
    first: datetime,
    last: datetime,
    precision: Precision,
    registry: PrecisionRegistry,
) -> str:
    """Render an interval's boundaries; a single unit renders as one boundary."""
    left = registry.format(first, precision)
    right = registry.format(last, precision)
    if left == right:
        return left
    return registry.format_left_right(left, right)


def parse_boundary(string: str, registry: PrecisionRegistry) -> tuple[datetime, Precision]:
    """Read one full boundary (no ``/``) into ``(timestamp, precision)``."""
    precision, iso = registry.parse(string)
    return from_canonical(iso), precision


def parse_boundaries(
    string: str,
    registry: PrecisionRegistry,
) -> list[tuple[datetime, Precision]]:
    """Split interval text into one or two full boundaries.

    The right-hand suffix is overlaid onto the tail of the left boundary
    before parsing. Both halves must resolve to the same precision.

    Raises:
        ParseError: On an empty half, more than one ``/``, a suffix longer than
            the left boundary, mismatched precisions, or malformed digits.
    """
    parts = string.split("/")
    if len(parts) == 1:
        return [parse_boundary(string, registry)]
    if len(parts) != 2 or not all(parts):
        msg = f"Malformed interval {string!r}"
        raise ParseError(msg)

    left, right = parts
    if len(right) > len(left):
        msg = f"Right boundary of {string!r} is longer than the left boundary"
        raise ParseError(msg)
    right = left[: len(left) - len(right)] + right

    left_bound = parse_boundary(left, registry)
    right_bound = parse_boundary(right, registry)
    if left_bound[1] != right_bound[1]:
        msg = (
            f"Boundaries of {string!r} resolve to different precisions: "
            f"{left_bound[1]} and {right_bound[1]}"
        )
        raise ParseError(msg)
    return [left_bound, right_bound]

"""Precision values, the granularity tag carried by every interval.

Built-in precisions, coarsest to finest: year, month, day, hour, minute,
second, and six sub-second scales (``microsecond(1)`` .. ``microsecond(6)``,
each a count of fractional-second digits).

Precisions carry no ordering of their own. Their order is owned by the
registry, so extensions can interleave new values (e.g. ``quarter``).
"""

from __future__ import annotations

from dataclasses import dataclass

from calinterval.errors import InvalidPrecisionError


@dataclass(frozen=True)
class Precision:
    """A granularity tag, e.g. ``Precision("day")`` or ``Precision("microsecond", 3)``."""

    name: str
    scale: int | None = None

    def __str__(self) -> str:
        if self.scale is None:
            return self.name
        return f"{self.name}({self.scale})"


def microsecond(scale: int) -> Precision:
    """Sub-second precision with *scale* fractional digits (1..6)."""
    if not 1 <= scale <= 6:
        msg = f"Sub-second scale must be between 1 and 6; got {scale}"
        raise InvalidPrecisionError(msg)
    return Precision("microsecond", scale)


YEAR = Precision("year")
MONTH = Precision("month")
DAY = Precision("day")
HOUR = Precision("hour")
MINUTE = Precision("minute")
SECOND = Precision("second")

MICROSECOND_SCALES: tuple[Precision, ...] = tuple(microsecond(i) for i in range(1, 7))

MILLISECOND = microsecond(3)
MICROSECOND = microsecond(6)

# Finest built-in precision; one unit of it is the minimal tick.
FINEST = MICROSECOND

BUILTIN_PRECISIONS: tuple[Precision, ...] = (
    YEAR,
    MONTH,
    DAY,
    HOUR,
    MINUTE,
    SECOND,
    *MICROSECOND_SCALES,
)

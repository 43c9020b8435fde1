"""Calendar intervals at a chosen precision.

    >>> from calinterval import Interval
    >>> str(Interval.parse("2018-01/02").next())
    '2018-03/04'
"""

from calinterval.domain.algebra import Relation, gaps, intersection, relation, split, union
from calinterval.domain.interval import Interval
from calinterval.domain.precision import (
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
from calinterval.domain.recurrence import recur
from calinterval.domain.registry import (
    PrecisionRegistry,
    get_registry,
    set_default_registry,
    use_registry,
)
from calinterval.errors import (
    CalendarIntervalError,
    DescendingIntervalError,
    InvalidPrecisionError,
    ParseError,
    PrecisionMismatchError,
    RegistryConfigError,
    TimestampRangeError,
    UnregisteredPrecisionError,
)

__all__ = [
    "DAY",
    "HOUR",
    "MICROSECOND",
    "MILLISECOND",
    "MINUTE",
    "MONTH",
    "SECOND",
    "YEAR",
    "CalendarIntervalError",
    "DescendingIntervalError",
    "Interval",
    "InvalidPrecisionError",
    "ParseError",
    "Precision",
    "PrecisionMismatchError",
    "PrecisionRegistry",
    "RegistryConfigError",
    "Relation",
    "TimestampRangeError",
    "UnregisteredPrecisionError",
    "gaps",
    "get_registry",
    "intersection",
    "microsecond",
    "recur",
    "relation",
    "set_default_registry",
    "split",
    "union",
    "use_registry",
]

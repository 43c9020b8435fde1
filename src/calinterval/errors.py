"""Error kinds raised by calinterval.

Every failure is local and synchronous: the engine does no I/O, so each of
these signals a programming or input error that surfaces straight to the caller.
"""

from __future__ import annotations


class CalendarIntervalError(Exception):
    """Base class for all calinterval errors."""


class InvalidPrecisionError(CalendarIntervalError, ValueError):
    """Unregistered precision, or a precision in the wrong direction for nest/enclosing."""


class ParseError(CalendarIntervalError, ValueError):
    """A string does not match any registered precision shape."""


class PrecisionMismatchError(CalendarIntervalError, ValueError):
    """A binary operation was given intervals of differing precision."""


class DescendingIntervalError(CalendarIntervalError, ValueError):
    """An interval would end before it starts."""


class UnregisteredPrecisionError(CalendarIntervalError, LookupError):
    """Registry lookup for a precision that is no longer registered."""


class RegistryConfigError(CalendarIntervalError):
    """The configured precision modifiers produced an invalid registration list."""


class TimestampRangeError(CalendarIntervalError, OverflowError):
    """Stepping would leave the representable range (years 1 through 9999)."""

"""Capability records behind each registered precision.

A unit recognises and renders the text of the precisions it serves.
Counting, stepping and truncation default to the shared arithmetic in
:mod:`calinterval.domain.arithmetic`.

Textual shapes are prefixes of the canonical 26-character form
``YYYY-MM-DD HH:MM:SS.ffffff``; :func:`from_canonical` is the single strict
gate from text back to a timestamp.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import datetime

from calinterval.domain import arithmetic
from calinterval.domain.precision import (
    DAY,
    HOUR,
    MICROSECOND_SCALES,
    MINUTE,
    MONTH,
    SECOND,
    YEAR,
    Precision,
)
from calinterval.errors import ParseError, UnregisteredPrecisionError

CANONICAL_LENGTH = 26

_CANONICAL_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})\.(\d{6})$",
    re.ASCII,
)


def canonical(ts: datetime) -> str:
    """Render *ts* as ``YYYY-MM-DD HH:MM:SS.ffffff``."""
    return ts.isoformat(sep=" ", timespec="microseconds")


def from_canonical(text: str) -> datetime:
    """Read a full canonical string back into a naive datetime.

    Raises:
        ParseError: If *text* is not exactly the canonical shape or names an
            impossible date or time.
    """
    match = _CANONICAL_PATTERN.match(text)
    if match is None:
        msg = f"Malformed timestamp {text!r}"
        raise ParseError(msg)
    try:
        return datetime(*(int(part) for part in match.groups()))
    except ValueError as exc:
        msg = f"Invalid timestamp {text!r}: {exc}"
        raise ParseError(msg) from exc


def join_shared_prefix(left: str, right: str, size: int) -> str | None:
    """Return ``left/right-suffix`` when both strings share their first *size* chars."""
    if len(left) <= size or len(right) <= size:
        return None
    if left[:size] != right[:size]:
        return None
    return f"{left}/{right[size:]}"


class PrecisionUnit(ABC):
    """Capability record for one or more precisions.

    Subclasses implement the textual side (``to_iso``, ``format``,
    ``format_left_right``) and may override the arithmetic side.
    """

    @abstractmethod
    def precisions(self) -> list[Precision]:
        """Precisions served by this unit, coarsest first."""

    @abstractmethod
    def to_iso(self, string: str) -> tuple[Precision, str] | None:
        """Recognise *string* and pad it to the canonical form, or return None."""

    @abstractmethod
    def format(self, ts: datetime, precision: Precision) -> str:
        """Render *ts* at *precision*."""

    @abstractmethod
    def format_left_right(self, left: str, right: str) -> str | None:
        """Combine two formatted boundaries into the compact form, or return None."""

    def count(self, first: datetime, last: datetime, precision: Precision) -> int:
        return arithmetic.count(first, last, precision)

    def next_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        return arithmetic.next_timestamp(ts, precision, step)

    def prev_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        return arithmetic.prev_timestamp(ts, precision, step)

    def truncate(self, ts: datetime, precision: Precision) -> datetime:
        return arithmetic.truncate(ts, precision)


class FixedWidthUnit(PrecisionUnit):
    """A precision whose text is the first *width* characters of the canonical form."""

    def __init__(self, precision: Precision, width: int) -> None:
        self._precision = precision
        self._width = width
        self._pad = "0000-01-01 00:00:00.000000"[width:]

    def precisions(self) -> list[Precision]:
        return [self._precision]

    def to_iso(self, string: str) -> tuple[Precision, str] | None:
        if len(string) != self._width:
            return None
        return self._precision, string + self._pad

    def format(self, ts: datetime, precision: Precision) -> str:
        return canonical(ts)[: self._width]

    def format_left_right(self, left: str, right: str) -> str | None:
        # Share everything up to and including the separator after this field.
        return join_shared_prefix(left, right, self._width + 1)

    def __repr__(self) -> str:
        return f"FixedWidthUnit({self._precision}, width={self._width})"


class SubsecondUnit(PrecisionUnit):
    """The six fractional-second precisions, 21..26 characters wide."""

    _WIDTHS: dict[Precision, int] = {
        precision: 20 + scale for scale, precision in enumerate(MICROSECOND_SCALES, start=1)
    }

    def precisions(self) -> list[Precision]:
        return list(self._WIDTHS)

    def to_iso(self, string: str) -> tuple[Precision, str] | None:
        for precision, width in self._WIDTHS.items():
            if len(string) == width:
                return precision, string + "0" * (CANONICAL_LENGTH - width)
        return None

    def format(self, ts: datetime, precision: Precision) -> str:
        try:
            width = self._WIDTHS[precision]
        except KeyError:
            msg = f"Sub-second unit does not serve precision {precision}"
            raise UnregisteredPrecisionError(msg) from None
        return canonical(ts)[:width]

    def format_left_right(self, left: str, right: str) -> str | None:
        for width in sorted(self._WIDTHS.values(), reverse=True):
            combined = join_shared_prefix(left, right, width + 1)
            if combined is not None:
                return combined
        return None

    def __repr__(self) -> str:
        return "SubsecondUnit()"


def builtin_entries() -> list[tuple[Precision, PrecisionUnit]]:
    """The default ordered ``(precision, unit)`` registration list."""
    entries: list[tuple[Precision, PrecisionUnit]] = [
        (precision, FixedWidthUnit(precision, width))
        for precision, width in (
            (YEAR, 4),
            (MONTH, 7),
            (DAY, 10),
            (HOUR, 13),
            (MINUTE, 16),
            (SECOND, 19),
        )
    ]
    subsecond = SubsecondUnit()
    entries.extend((precision, subsecond) for precision in subsecond.precisions())
    return entries

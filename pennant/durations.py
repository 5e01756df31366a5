"""
Duration scalar for duration-typed flags.

A Duration is an int counting nanoseconds (its "ticks"). Numeric values given
to a duration flag are taken as raw ticks, while strings must be duration
literals carrying a unit suffix:

    literal  := [-+]? segment+ | "0"
    segment  := digits? ("." digits?)? unit      (at least one digit per segment)
    unit     := "ns" | "us" | "µs" | "μs" | "ms" | "s" | "m" | "h"

    >>> Duration.parse("1h30m")
    Duration(5400000000000)
    >>> str(Duration.parse("1500ms"))
    '1.5s'
"""
import datetime
import re
from typing import final

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_SEGMENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")

_LIMIT = 1 << 63


def _fraction(ticks, size, /):
    whole, rest = divmod(ticks, size)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(size)) - 1, "0").rstrip("0")
    return "%d.%s" % (whole, digits)


@final
class Duration(int):
    """
    Signed 64-bit nanosecond count with a canonical text form.

    str() renders the shortest unit-suffixed literal, the same form parse()
    accepts: "0s", "1ns", "2.5µs", "250ms", "1.5s", "1m0s", "1h30m0s".
    """
    __slots__ = ()

    @classmethod
    def parse(cls, text, /):
        """
        Parse a duration literal; raise ValueError when it is malformed,
        lacks a unit, uses an unknown unit or overflows 64 bits.
        """
        if not isinstance(text, str):
            raise TypeError("Duration.parse() argument must be a string")

        literal = text
        negative = False
        if text[:1] in ("-", "+"):
            negative = text[0] == "-"
            text = text[1:]

        if text == "0":
            return cls(0)
        if not text:
            raise ValueError("invalid duration %r" % literal)

        total = 0
        position = 0
        while position < len(text):
            if not (match := _SEGMENT.match(text, position)):
                raise ValueError("invalid duration %r" % literal)
            whole, fraction, unit = match.groups()
            if not whole and not fraction:
                raise ValueError("invalid duration %r" % literal)
            try:
                size = _UNITS[unit]
            except KeyError:
                raise ValueError("unknown unit %r in duration %r" % (unit, literal)) from None
            total += int(whole or "0") * size
            if fraction:
                total += int(fraction) * size // 10 ** len(fraction)
            if total > _LIMIT:
                raise ValueError("invalid duration %r" % literal)
            position = match.end()

        if not negative and total == _LIMIT:
            raise ValueError("invalid duration %r" % literal)
        return cls(-total if negative else total)

    @classmethod
    def from_timedelta(cls, delta, /):
        return cls((delta.days * 86400 + delta.seconds) * SECOND + delta.microseconds * MICROSECOND)

    def to_timedelta(self):
        """Convert to datetime.timedelta (sub-microsecond ticks are truncated)."""
        microseconds = abs(int(self)) // MICROSECOND
        return datetime.timedelta(microseconds=-microseconds if self < 0 else microseconds)

    def __repr__(self):
        return "Duration(%d)" % self

    def __str__(self):
        ticks = int(self)
        if ticks == 0:
            return "0s"

        sign = "-" if ticks < 0 else ""
        ticks = abs(ticks)

        if ticks < MICROSECOND:
            return "%s%dns" % (sign, ticks)
        if ticks < MILLISECOND:
            return sign + _fraction(ticks, MICROSECOND) + "µs"
        if ticks < SECOND:
            return sign + _fraction(ticks, MILLISECOND) + "ms"

        hours, ticks = divmod(ticks, HOUR)
        minutes, ticks = divmod(ticks, MINUTE)
        seconds = _fraction(ticks, SECOND) + "s"
        if hours:
            return "%s%dh%dm%s" % (sign, hours, minutes, seconds)
        if minutes:
            return "%s%dm%s" % (sign, minutes, seconds)
        return sign + seconds


__all__ = (
    "Duration",
    "NANOSECOND",
    "MICROSECOND",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
)

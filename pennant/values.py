"""
Pennant values: typed destinations and the coercion table.

Overview
- Kind: the closed set of destination kinds, eight scalars and their list forms.
  • scalars: STRING, BOOL, INT, INT64, UINT, UINT64, FLOAT, DURATION
  • lists:   STRING_LIST, INT_LIST, INT64_LIST, UINT_LIST, UINT64_LIST,
             FLOAT_LIST, DURATION_LIST
- Slot[_T]: the caller-owned cell a flag writes into (slot.value).
- Value: a Slot paired with its Kind; Value.set() is the single assignment path
  used for command-line strings, source values and defaults alike.
- coerce(kind, value): the scalar coercion table.
- pretty(value): human-readable rendering shared by the string rule and usage.

Coercion rules (scalar)
- STRING    str as-is, bytes decoded as UTF-8, bool as "true"/"false", anything
            else through pretty(); None is rejected.
- INT/INT64 integers wrap to signed 64-bit, floats truncate toward zero,
            decimal strings must fit the range; bool is rejected.
- UINT/…64  integers wrap modulo 2**64 (so -1 becomes 2**64-1), floats truncate,
            unsigned decimal strings must fit the range; bool is rejected.
- FLOAT     ints and floats convert, float literals parse; bool is rejected.
- BOOL      bool as-is, literals 1/t/T/TRUE/true/True and 0/f/F/FALSE/false/False.
- DURATION  Duration as-is, timedelta converts, ints/floats are raw nanosecond
            ticks, strings must be unit-suffixed literals ("5s", "1h30m"); a bare
            "1" is rejected even though the number 1 is accepted.

Coercion rules (lists)
- list/tuple  every item is coerced with the scalar rule; the result replaces
              the destination, or nothing changes if any item fails.
- scalar      coerced with the scalar rule; replaces the destination with a
              one-item list, or is appended to it with set(value, append=True)
              (repeated command-line flags).

On failure CoercionError is raised and the slot keeps its previous contents.
"""
import datetime
import math
import re
from collections.abc import Mapping, Set
from enum import Enum
from typing import Generic, TypeVar

from .durations import Duration
from .faults import CoercionError, FaultCode

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

_TRUTHS = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSEHOODS = frozenset(("0", "f", "F", "FALSE", "false", "False"))

_T = TypeVar("_T")

_WIDTH = 1 << 64
_HALF = 1 << 63


class Kind(Enum):
    """
    destination kinds; the value is the label shown in usage output.
    """
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT = "float"
    DURATION = "duration"

    STRING_LIST = "list of string"
    INT_LIST = "list of int"
    INT64_LIST = "list of int64"
    UINT_LIST = "list of uint"
    UINT64_LIST = "list of uint64"
    FLOAT_LIST = "list of float"
    DURATION_LIST = "list of duration"

    @property
    def sequential(self):
        return self.name.endswith("_LIST")

    @property
    def element(self):
        """the scalar kind of a list kind (scalars return themselves)."""
        return Kind[self.name.removesuffix("_LIST")]

    @property
    def zero(self):
        """a fresh zero value for a destination of this kind."""
        if self.sequential:
            return []
        match self:
            case Kind.STRING:
                return ""
            case Kind.BOOL:
                return False
            case Kind.FLOAT:
                return 0.0
            case Kind.DURATION:
                return Duration(0)
            case _:
                return 0


class Slot(Generic[_T]):
    """
    destination cell for a flag; the flag set writes `value`, the caller reads it.
    """
    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return "Slot(%r)" % (self.value,)


class Value:
    """
    assignment view over a Slot for a given Kind.
    """
    __slots__ = ("slot", "kind")

    def __init__(self, slot, kind, /):
        if not isinstance(kind, Kind):
            raise TypeError("Value() second argument must be a Kind")
        self.slot = slot
        self.kind = kind

    @property
    def sequential(self):
        return self.kind.sequential

    @property
    def boolean(self):
        return self.kind is Kind.BOOL

    def set(self, value, /, append=False):
        """
        coerce `value` into the slot; raise CoercionError and leave the slot
        untouched when it cannot be converted.

        a scalar given to a list kind replaces the contents with a one-item
        list, or is appended to them when `append` is true.
        """
        kind = self.kind
        if not kind.sequential:
            self.slot.value = coerce(kind, value)
            return

        match value:
            case list() | tuple():
                items = []
                for index, item in enumerate(value):
                    try:
                        items.append(coerce(kind.element, item))
                    except CoercionError as fault:
                        raise _fault(
                            "cannot assign item %d of %s to %s: %s" % (index, pretty(value), kind.value, fault),
                            value,
                            kind
                        ) from fault
                self.slot.value = items
            case None | Mapping() | Set():
                raise _mismatch(value, kind)
            case _:
                item = coerce(kind.element, value)
                self.slot.value = [*self.slot.value, item] if append else [item]

    def __repr__(self):
        return "Value(%r, %s)" % (self.slot, self.kind)


def _fault(message, value, kind, /):
    return CoercionError(
        message,
        title="invalid value",
        code=FaultCode.UNCOERCIBLE_VALUE,
        hint="provide a %s value" % kind.value,
        value=value,
        kind=kind
    )


def _mismatch(value, kind, /):
    return _fault("cannot assign %s to %s" % (type(value).__name__, kind.value), value, kind)


def _decode(value, kind, /):
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        raise _fault("cannot decode %r as utf-8 text for %s" % (bytes(value), kind.value), value, kind) from None


def _truncate(value, kind, /):
    if math.isnan(value) or math.isinf(value):
        raise _fault("cannot assign %r to %s" % (value, kind.value), value, kind)
    return math.trunc(value)


def _string(value, /):
    match value:
        case str():
            return value
        case bytes() | bytearray():
            return _decode(value, Kind.STRING)
        case None:
            raise _mismatch(value, Kind.STRING)
        case _:
            return pretty(value)


def _boolean(value, /):
    match value:
        case bool():
            return value
        case str() if value in _TRUTHS:
            return True
        case str() if value in _FALSEHOODS:
            return False
        case str():
            raise _fault("invalid bool literal %r" % value, value, Kind.BOOL)
        case bytes() | bytearray():
            return _boolean(_decode(value, Kind.BOOL))
        case _:
            raise _mismatch(value, Kind.BOOL)


def _signed(value, kind, /):
    match value:
        case bool():
            raise _mismatch(value, kind)
        case int():
            number = value
        case float():
            number = _truncate(value, kind)
        case str():
            if not _SIGNED.fullmatch(value):
                raise _fault("invalid %s literal %r" % (kind.value, value), value, kind)
            if not -_HALF <= (number := int(value)) < _HALF:
                raise _fault("%s literal %r out of range" % (kind.value, value), value, kind)
            return number
        case bytes() | bytearray():
            return _signed(_decode(value, kind), kind)
        case _:
            raise _mismatch(value, kind)
    return (number + _HALF) % _WIDTH - _HALF


def _unsigned(value, kind, /):
    match value:
        case bool():
            raise _mismatch(value, kind)
        case int():
            number = value
        case float():
            number = _truncate(value, kind)
        case str():
            if not _UNSIGNED.fullmatch(value):
                raise _fault("invalid %s literal %r" % (kind.value, value), value, kind)
            if (number := int(value)) >= _WIDTH:
                raise _fault("%s literal %r out of range" % (kind.value, value), value, kind)
            return number
        case bytes() | bytearray():
            return _unsigned(_decode(value, kind), kind)
        case _:
            raise _mismatch(value, kind)
    return number % _WIDTH


def _floating(value, /):
    match value:
        case bool():
            raise _mismatch(value, Kind.FLOAT)
        case int() | float():
            try:
                return float(value)
            except OverflowError:
                raise _fault("%d is out of range for float" % value, value, Kind.FLOAT) from None
        case str():
            if not value or value != value.strip() or "_" in value:
                raise _fault("invalid float literal %r" % value, value, Kind.FLOAT)
            try:
                number = float(value)
            except ValueError:
                raise _fault("invalid float literal %r" % value, value, Kind.FLOAT) from None
            if math.isinf(number) and "inf" not in value.lower():
                raise _fault("float literal %r out of range" % value, value, Kind.FLOAT)
            return number
        case bytes() | bytearray():
            return _floating(_decode(value, Kind.FLOAT))
        case _:
            raise _mismatch(value, Kind.FLOAT)


def _duration(value, /):
    match value:
        case Duration():
            return value
        case datetime.timedelta():
            return Duration.from_timedelta(value)
        case bool():
            raise _mismatch(value, Kind.DURATION)
        case int():
            return Duration((value + _HALF) % _WIDTH - _HALF)
        case float():
            return Duration((_truncate(value, Kind.DURATION) + _HALF) % _WIDTH - _HALF)
        case str():
            try:
                return Duration.parse(value)
            except ValueError as error:
                raise _fault(str(error), value, Kind.DURATION) from None
        case bytes() | bytearray():
            return _duration(_decode(value, Kind.DURATION))
        case _:
            raise _mismatch(value, Kind.DURATION)


def coerce(kind, value, /):
    """
    convert `value` to the scalar `kind`, raising CoercionError on failure.

    list kinds are handled by Value.set(); passing one here is a TypeError.
    """
    match kind:
        case Kind.STRING:
            return _string(value)
        case Kind.BOOL:
            return _boolean(value)
        case Kind.INT | Kind.INT64:
            return _signed(value, kind)
        case Kind.UINT | Kind.UINT64:
            return _unsigned(value, kind)
        case Kind.FLOAT:
            return _floating(value)
        case Kind.DURATION:
            return _duration(value)
    raise TypeError("coerce() first argument must be a scalar kind, not %r" % (kind,))


def pretty(value, /):
    """
    render a value for people: booleans in lowercase, lists as "[a, b]",
    durations in their literal form.
    """
    match value:
        case bool():
            return "true" if value else "false"
        case str():
            return value
        case bytes() | bytearray():
            return bytes(value).decode("utf-8", "replace")
        case list() | tuple():
            return "[%s]" % ", ".join(map(pretty, value))
        case _:
            return str(value)


__all__ = (
    "Kind",
    "Slot",
    "Value",
    "coerce",
    "pretty",
)

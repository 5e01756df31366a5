"""
Pennant utilities shared by the values, sources and flag-set modules.

- Unset: the "nothing here" sentinel. Sources answer Unset for keys they do not
  know because None is a legitimate decoded value (a JSON null, an empty YAML
  entry); optional constructor parameters default to it for the same reason.
- coalesce(value, default): Unset becomes default, anything else is kept.
- rename(function, name): give a generated function its public name.
- mirror("attr"): read-only property over self._attr handing out copies.

    >>> coalesce(Unset, 8080)
    8080
    >>> coalesce(0, 8080)
    0
"""
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    type of the Unset sentinel: falsy, unique per process, not subclassable,
    and preserved by copy and pickle.
    """
    __slots__ = ()

    def __new__(cls):
        try:
            return Unset
        except NameError:
            return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(value, default=None, /):
    """return `default` when `value` is Unset, else `value` (None and 0 included)."""
    if value is Unset:
        return default
    return value


def rename(function, name, /, owner=None):
    """
    set __name__ and __qualname__ of a generated function.

    with an owner class the qualified name becomes "Owner.name", as it would
    be for a method written in the class body.
    """
    if not callable(function):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str) or not name.isidentifier():
        raise TypeError("rename() second argument must be an identifier")
    function.__name__ = name
    function.__qualname__ = name if owner is None else "%s.%s" % (owner.__qualname__, name)
    return function


def _snapshot(value):
    match value:
        case str() | bytes() | bytearray():
            return value
        case Mapping():
            return {key: _snapshot(item) for key, item in value.items()}
        case Sequence():
            return [_snapshot(item) for item in value]
        case Set():
            return {_snapshot(item) for item in value}
    return value


def mirror(name, /):
    """
    read-only property exposing self._<name>.

    containers come back as fresh lists, dicts and sets, so callers may mutate
    what they receive without touching the owner.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    def getter(self):
        return _snapshot(getattr(self, attribute))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)

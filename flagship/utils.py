"""
Flagship utilities (small building blocks shared by the other modules)

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "not provided", distinct from None.
  • Falsey, printable as "Unset", sealed against subclassing.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; keep None/0/""/[] untouched.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated closures (clean tracebacks).

- mirror("attr")
  • Read-only property over the private backing field self._attr.
  • Containers are handed out as immutable views (tuple, frozenset, MappingProxyType).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    sentinel type for "value not provided".

    notes
    - bool(Unset) is False, but Unset is not None.
    - UnsetType() always returns the same instance.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    return default when object is Unset, otherwise object itself.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set __name__ and __qualname__ on a callable.

    usage
    - rename(fn, "name") renames in place and returns fn.
    - @rename("name") works as a decorator.
    """
    if name is None:
        if not isinstance(x, str):
            raise TypeError("rename() decorator form expects a string name")
        return functools.partial(rename, name=x)

    if not callable(x):
        raise TypeError("rename() first argument must be callable")

    x.__name__ = name
    x.__qualname__ = name
    return x


def mirror(name):
    """
    build a read-only property exposing self._<name>.

    behavior
    - Sequence (non-str) → tuple
    - Mapping           → MappingProxyType
    - Set               → frozenset
    - other types       → returned as-is
    """

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)

"""
Flagship registry entries: uniform handles over differently typed descriptors.

An Entry owns exactly one Flag[_T] or Positional[_T] and exposes a fixed set of
closures bound to it. The dispatcher only talks to entries, so a scope can keep
Flag[int], Flag[bool] and Flag[str] side by side in one mapping without ever
inspecting _T.

Capabilities
- set_value(token) -> Result      convert + validate through the descriptor
- has_value() -> bool
- is_required() -> bool
- is_boolean() -> bool            decides whether a bare following token is a value
- validate() -> Result
- reset()
- name, get_short_name(), get_description()   display accessors
- render(colorful=False) -> Text  one help line (see flagship.rendering)
"""
import functools

from . import rendering
from .descriptors import Flag, Positional
from .utils import coalesce


class Entry:
    __slots__ = (
        "descriptor",
        "kind",
        "name",
        "get_short_name",
        "get_description",
        "set_value",
        "has_value",
        "is_required",
        "is_boolean",
        "validate",
        "reset",
        "render",
    )

    def __init__(self, descriptor, /):
        if isinstance(descriptor, Flag):
            self.kind = "flag"
            self.name = descriptor.long_name
            self.get_short_name = lambda: coalesce(descriptor.short_name)
            self.render = functools.partial(rendering.describe_flag, descriptor)
        elif isinstance(descriptor, Positional):
            self.kind = "positional"
            self.name = descriptor.name
            self.get_short_name = lambda: None
            self.render = functools.partial(rendering.describe_positional, descriptor)
        else:
            raise TypeError("entry descriptor must be a Flag or a Positional")

        self.descriptor = descriptor
        self.get_description = lambda: descriptor.descr
        self.set_value = descriptor.set_value_from_token
        self.has_value = lambda: descriptor.has_value
        self.is_required = lambda: descriptor.required
        self.is_boolean = lambda: descriptor.is_boolean
        self.validate = descriptor.validate
        self.reset = descriptor.reset

    def get_value_as_string(self):
        if not self.has_value():
            return ""
        value = self.descriptor.value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def __repr__(self):
        return f"Entry({self.kind}, {self.name!r})"


__all__ = (
    "Entry",
)

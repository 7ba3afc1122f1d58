r"""
Flagship typed descriptors: the value-bearing units a scope is declared with.

Overview
- Flag[_T]: named argument (--long / -s) holding one value of type _T.
- Positional[_T]: argument identified by its position, matched in declaration order.

Both own a value slot and know how to fill it from a raw token:
    set_value_from_token(token) = convert (flagship.converters) → store → validate()

Metadata (sanitized on construction and on every fluent setter)
- long_name / name: r"[^\W_][\w-]*" (letters, digits, '-' and '_', no leading dash).
- short_name: same pattern, usually one letter (p for -p).
- type: any type with a registered converter (str, int, float, bool built in).
- default: instance of type (int accepted for float); initializes the value slot.
- choices: ordered, duplicate-free collection of type; empty means unrestricted.
- validator: callable(value) -> Result, run after the choice check.

Introspection & representation
- DescriptorType metaclass exposes the fields listed in __introspectable__ as
  read-only properties and provides __repr__/__rich_repr__.

Quick example:
    >>> port = Flag("port", "Port to listen on", type=int).set_short_name("p").set_default(8080)
    >>> port.set_value_from_token("9000")
    Result.ok(None)
    >>> port.value
    9000
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable

from . import converters
from .faults import Error
from .results import Result
from .utils import *

_NAME = re.compile(r"[^\W_][\w-]*")


class DescriptorType(type):
    """
    metaclass giving descriptors read-only fields and stable representations.

    conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in declaration-time error messages.
    - __displayable__ (if set) narrows which properties __rich_repr__ shows;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, field, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    if not _NAME.fullmatch(name):
        raise ValueError(f"{cls.__typename__} '{field}' must be a bare name without leading dashes, got {name!r}")
    return name


def _sanitize_text(cls, field, text, /):
    if not isinstance(text, str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    return text.strip()


def _sanitize_type(cls, type, /):
    if not isinstance(type, builtins.type):
        raise TypeError(f"{cls.__typename__} 'type' must be a type")
    if not converters.supports(type):
        raise TypeError(f"{cls.__typename__} 'type' {type.__name__!r} has no registered converter")
    return type


def _sanitize_value(cls, field, type, value, /):
    # An int is a valid float default; a bool is never a valid int/float default.
    if type is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, bool) and type is not bool:
        raise TypeError(f"{cls.__typename__} '{field}' must be of type {type.__name__!r}")
    if not isinstance(value, type):
        raise TypeError(f"{cls.__typename__} '{field}' must be of type {type.__name__!r}")
    return value


def _sanitize_validator(cls, validator, /):
    if validator is not Unset and not callable(validator):
        raise TypeError(f"{cls.__typename__} 'validator' must be callable")
    return validator


def _run_validator(cls, validator, value, /):
    result = validator(value)
    if not isinstance(result, Result):
        raise TypeError(f"{cls.__typename__} validator must return a Result, got {type(result).__name__!r}")
    return result


class Flag[_T](metaclass=DescriptorType):
    """
    named argument holding a single typed value.

    lifecycle
    - the value slot starts at the default (Unset when there is none).
    - each recognized occurrence on the command line overwrites it.
    - reset() puts the default back; scopes call it before every parse.
    """
    __introspectable__ = (
        "long_name",
        "short_name",
        "type",
        "descr",
        "long_descr",
        "required",
        "choices",
        "validator",
    )
    __displayable__ = (
        "long_name",
        "short_name",
        "type",
        "required",
        "default",
        "value",
    )

    def __init__(
            self,
            long_name,
            descr="",
            /,
            type=str,
            *,
            short_name=Unset,
            required=False,
            default=Unset,
            choices=(),
            validator=Unset,
            long_descr="",
    ):
        cls = builtins.type(self)
        self._long_name = _sanitize_name(cls, "long_name", long_name)
        self._descr = _sanitize_text(cls, "descr", descr)
        self._type = _sanitize_type(cls, type)
        self._short_name = Unset
        self._required = False
        self._default = Unset
        self._value = Unset
        self._choices = ()
        self._validator = Unset
        self._long_descr = ""

        if short_name is not Unset:
            self.set_short_name(short_name)
        self.set_required(required)
        if default is not Unset:
            self.set_default(default)
        self.set_choices(choices)
        self.set_validator(validator)
        self.set_long_descr(long_descr)

    # --- fluent configuration ---

    def set_short_name(self, short_name, /):
        self._short_name = _sanitize_name(builtins.type(self), "short_name", short_name)
        return self

    def set_required(self, required=True, /):
        if not isinstance(required, bool):
            raise TypeError(f"{builtins.type(self).__typename__} 'required' must be a boolean")
        self._required = required
        return self

    def set_default(self, default, /):
        self._default = _sanitize_value(builtins.type(self), "default", self._type, default)
        self._value = self._default
        return self

    def set_choices(self, choices, /):
        cls = builtins.type(self)
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of {self._type.__name__!r}")
        choices = [_sanitize_value(cls, "choices", self._type, choice) for choice in choices]
        for index, choice in enumerate(choices):
            if choice in choices[:index]:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates ({choice!r})")
        self._choices = tuple(choices)
        return self

    def set_validator(self, validator, /):
        self._validator = _sanitize_validator(builtins.type(self), validator)
        return self

    def set_long_descr(self, long_descr, /):
        self._long_descr = _sanitize_text(builtins.type(self), "long_descr", long_descr)
        return self

    # --- value slot ---

    @property
    def default(self):
        return coalesce(self._default)

    @property
    def value(self):
        return coalesce(self._value)

    @property
    def has_value(self):
        return self._value is not Unset

    @property
    def has_default(self):
        return self._default is not Unset

    @property
    def is_boolean(self):
        return self._type is bool

    def reset(self):
        self._value = self._default

    def set_value_from_token(self, token, /):
        """
        convert token, store it, then validate.

        behavior
        - conversion failures are returned untouched (INVALID_FLAG_VALUE).
        - a converted value is stored even if validation then rejects it.
        """
        result = converters.convert(self._type, token)
        if not result:
            return result
        self._value = result.value
        return self.validate()

    def validate(self):
        """
        check the current value against choices, then the custom validator.

        an empty slot is valid: requiredness is checked by the owning scope.
        """
        if self._value is Unset:
            return Result.ok()
        if self._choices and self._value not in self._choices:
            return Result.err(Error.validation_failed(self._long_name, "value not in allowed choices"))
        if self._validator is not Unset:
            return _run_validator(builtins.type(self), self._validator, self._value)
        return Result.ok()


class Positional[_T](metaclass=DescriptorType):
    """
    positional argument holding a single typed value.

    positionals take no defaults or choices; an optional one simply stays empty
    (value is None) when the command line runs out of tokens.
    """
    __introspectable__ = (
        "name",
        "type",
        "descr",
        "required",
        "validator",
    )
    __displayable__ = (
        "name",
        "type",
        "required",
        "value",
    )

    def __init__(self, name, descr="", /, required=True, type=str, *, validator=Unset):
        cls = builtins.type(self)
        self._name = _sanitize_name(cls, "name", name)
        self._descr = _sanitize_text(cls, "descr", descr)
        self._type = _sanitize_type(cls, type)
        if not isinstance(required, bool):
            raise TypeError(f"{cls.__typename__} 'required' must be a boolean")
        self._required = required
        self._validator = _sanitize_validator(cls, validator)
        self._value = Unset

    def set_validator(self, validator, /):
        self._validator = _sanitize_validator(builtins.type(self), validator)
        return self

    @property
    def value(self):
        return coalesce(self._value)

    @property
    def has_value(self):
        return self._value is not Unset

    @property
    def is_boolean(self):
        return self._type is bool

    def reset(self):
        self._value = Unset

    def set_value_from_token(self, token, /):
        """
        convert token, store it, then run the validator (if any).
        """
        result = converters.convert(self._type, token)
        if not result:
            return result
        self._value = result.value
        return self.validate()

    def validate(self):
        if self._value is Unset or self._validator is Unset:
            return Result.ok()
        return _run_validator(builtins.type(self), self._validator, self._value)


__all__ = (
    "Flag",
    "Positional",
)

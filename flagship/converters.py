"""
Flagship value conversion: raw token → typed value, or a typed failure.

Contract
- convert(type, token) returns Result.ok(value) or Result.err(Error) with kind
  INVALID_FLAG_VALUE. Converters never raise for bad input.
- Parsing is strict and covers the whole token: no partial matches, no
  surrounding whitespace, no locale-dependent forms, no digit separators.

Built-in types
- str   : identity (the empty token included).
- int   : -?[0-9]+ within the signed 32-bit range.
- float : decimal literal with optional fraction/exponent, or inf/infinity/nan.
- bool  : exactly true/false, 1/0, yes/no, on/off (case-sensitive).

Extending
    >>> import pathlib
    >>> @register(pathlib.Path)
    ... def _(token):
    ...     return Result.ok(pathlib.Path(token))
"""
import builtins
import math
import re

from .faults import Error
from .results import Result

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

BOOLEAN_LITERALS = {
    "true": True,
    "false": False,
    "1": True,
    "0": False,
    "yes": True,
    "no": False,
    "on": True,
    "off": False,
}

_INTEGER = re.compile(r"-?[0-9]+", re.ASCII)
_FLOAT = re.compile(
    r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|-?(?i:inf|infinity|nan)",
    re.ASCII,
)
_NONZERO = re.compile(r"[1-9]")

_converters = {}


def register(type, /):
    """
    decorator registering a converter for `type`.

    the converter receives the raw token and must return a Result. registering
    a type twice replaces the previous converter.
    """
    if not isinstance(type, builtins.type):
        raise TypeError("register() argument must be a type")

    def decorator(function):
        if not callable(function):
            raise TypeError("converter must be callable")
        _converters[type] = function
        return function

    return decorator


def converter(type, /):
    """
    return the converter registered for `type`, or raise TypeError.
    """
    try:
        return _converters[type]
    except (KeyError, TypeError):
        raise TypeError(f"no converter registered for {getattr(type, '__name__', type)!r}") from None


def supports(type, /):
    try:
        return type in _converters
    except TypeError:
        return False


def convert(type, token, /):
    """
    convert a raw token to `type` using the registered converter.
    """
    if not isinstance(token, str):
        raise TypeError("convert() token must be a string")
    return converter(type)(token)


@register(str)
def _convert_text(token):
    return Result.ok(token)


@register(int)
def _convert_integer(token):
    if not _INTEGER.fullmatch(token):
        return Result.err(Error.malformed_value("integer", token))
    negative = token.startswith("-")
    digits = token.lstrip("-").lstrip("0") or "0"
    # More significant digits than INT_MIN has cannot fit.
    if len(digits) > len(str(INT_MIN)) - 1:
        return Result.err(Error.value_out_of_range("integer", token))
    value = -int(digits) if negative else int(digits)
    if not INT_MIN <= value <= INT_MAX:
        return Result.err(Error.value_out_of_range("integer", token))
    return Result.ok(value)


@register(float)
def _convert_float(token):
    if not _FLOAT.fullmatch(token):
        return Result.err(Error.malformed_value("floating-point", token))
    value = float(token)
    # A finite literal that rounds to infinity has overflowed.
    if math.isinf(value) and "inf" not in token.lower():
        return Result.err(Error.value_out_of_range("floating-point", token))
    # A non-zero mantissa that rounds to zero has underflowed.
    if value == 0.0 and _NONZERO.search(token.lower().partition("e")[0]):
        return Result.err(Error.value_out_of_range("floating-point", token))
    return Result.ok(value)


@register(bool)
def _convert_boolean(token):
    try:
        return Result.ok(BOOLEAN_LITERALS[token])
    except KeyError:
        return Result.err(Error.invalid_boolean(token))


__all__ = (
    "BOOLEAN_LITERALS",
    "register",
    "converter",
    "supports",
    "convert",
)

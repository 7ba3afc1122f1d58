"""
Flagship faults: the closed error taxonomy and its factories.

Scope
- ErrorKind: stable numeric identifiers for every parse failure. Codes are grouped
  by domain (flags, positionals, values, structure) so logs stay searchable.
- Location: where an Error was produced (file, line, function).
- Error: immutable {kind, message, location} value. Errors are never raised; they
  travel inside a Result (see flagship.results) back to the caller.
- ResultAccessError: raised when a Result is read on the wrong side.

Message wording
- Every message is produced by exactly one factory classmethod on Error, so the
  copy for a given kind lives in a single place.
- Converter messages end with the offending token (": 'abc'") so a user can spot it.

Host integration
- ErrorKind.normalize() honors a __codes__ mapping defined in __main__, letting an
  application relabel codes in its output without touching the enumeration.
"""
import inspect
from collections import namedtuple
from enum import IntEnum

from rich.text import Text


class ErrorKind(IntEnum):
    """
    canonical error kinds (stable identifiers).

    grouping
    - none (0): default-constructed error, never returned from a fallible operation.
    - flags (2110x): UNKNOWN_FLAG, MISSING_REQUIRED_FLAG, MISSING_FLAG_VALUE
    - positionals (2120x): MISSING_REQUIRED_POSITIONAL, TOO_MANY_POSITIONALS
    - values (2130x): INVALID_FLAG_VALUE, VALIDATION_FAILED
    - structure (2190x): PARSER_NOT_INITIALIZED (reserved, never produced)
    """
    NONE                        = 0

    # --- flags ---
    UNKNOWN_FLAG                = 21101
    MISSING_REQUIRED_FLAG       = 21102
    MISSING_FLAG_VALUE          = 21103

    # --- positionals ---
    MISSING_REQUIRED_POSITIONAL = 21201
    TOO_MANY_POSITIONALS        = 21202

    # --- values ---
    INVALID_FLAG_VALUE          = 21301
    VALIDATION_FAILED           = 21302

    # --- structure ---
    PARSER_NOT_INITIALIZED      = 21901

    @property
    def title(self):
        """
        lowercase, space-separated label (e.g. "unknown flag").
        """
        return self.name.replace("_", " ").lower()

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


Location = namedtuple("Location", ("file", "line", "function"))


def _locate():
    # Frame layout: _locate <- factory <- caller of the factory.
    frame = inspect.currentframe()
    try:
        for _ in range(2):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        return Location(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)
    finally:
        del frame


class ResultAccessError(LookupError):
    """
    a Result was read on the side it does not hold.

    this is a contract violation in the calling code, not a parse failure,
    so it is raised instead of being returned.
    """


class Error:
    """
    immutable parse failure.

    fields
    - kind: ErrorKind
    - message: human-readable text, already formatted by a factory
    - location: optional Location naming the code that produced the error

    equality and hashing consider kind and message only; the location is a
    debugging aid and two errors raised from different places with the same
    wording compare equal.
    """
    __slots__ = ("_kind", "_message", "_location")

    def __init__(self, kind=ErrorKind.NONE, message="", /, location=None):
        if not isinstance(kind, ErrorKind):
            raise TypeError("error 'kind' must be an ErrorKind")
        if not isinstance(message, str):
            raise TypeError("error 'message' must be a string")
        if location is not None and not isinstance(location, Location):
            raise TypeError("error 'location' must be a Location")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_message", message)
        object.__setattr__(self, "_location", location)

    @property
    def kind(self):
        return self._kind

    @property
    def message(self):
        return self._message

    @property
    def location(self):
        return self._location

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __eq__(self, other):
        if not isinstance(other, Error):
            return NotImplemented
        return (self._kind, self._message) == (other._kind, other._message)

    def __hash__(self):
        return hash((self._kind, self._message))

    def __bool__(self):
        # Only the NONE kind is falsey, so "if error:" reads naturally.
        return self._kind is not ErrorKind.NONE

    def __repr__(self):
        return f"Error({self._kind.name}, {self._message!r})"

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "message", self._message
        yield "location", self._location, None

    def __rich__(self):
        return Text(self.format())

    def __str__(self):
        return self.format()

    def format(self, *, location=False):
        """
        render the message, optionally followed by " [file:line]".
        """
        if location and self._location is not None:
            return f"{self._message} [{self._location.file}:{self._location.line}]"
        return self._message

    # --- factories (one per message format) ---

    @classmethod
    def unknown_flag(cls, token):
        return cls(ErrorKind.UNKNOWN_FLAG, f"Unknown flag: {token}", location=_locate())

    @classmethod
    def missing_required_flag(cls, name):
        return cls(ErrorKind.MISSING_REQUIRED_FLAG, f"Required flag missing: --{name}", location=_locate())

    @classmethod
    def missing_subcommand(cls):
        return cls(ErrorKind.MISSING_REQUIRED_FLAG, "A subcommand is required", location=_locate())

    @classmethod
    def missing_required_positional(cls, name):
        return cls(ErrorKind.MISSING_REQUIRED_POSITIONAL, f"Required positional missing: {name}", location=_locate())

    @classmethod
    def invalid_flag_value(cls, name, value):
        return cls(ErrorKind.INVALID_FLAG_VALUE, f"Invalid value for --{name}: {value}", location=_locate())

    @classmethod
    def malformed_value(cls, what, token):
        """
        conversion failure: the token is not shaped like a(n) `what`.
        """
        return cls(ErrorKind.INVALID_FLAG_VALUE, f"Invalid {what} format: {token!r}", location=_locate())

    @classmethod
    def value_out_of_range(cls, what, token):
        """
        conversion failure: well-formed token whose magnitude does not fit.
        """
        return cls(ErrorKind.INVALID_FLAG_VALUE, f"{what.capitalize()} out of range: {token!r}", location=_locate())

    @classmethod
    def invalid_boolean(cls, token):
        return cls(
            ErrorKind.INVALID_FLAG_VALUE,
            f"Invalid boolean value (expected: true/false, 1/0, yes/no, on/off): {token!r}",
            location=_locate(),
        )

    @classmethod
    def too_many_positionals(cls, token=None):
        message = "Too many positional arguments"
        if token is not None:
            message += f" (unexpected {token!r})"
        return cls(ErrorKind.TOO_MANY_POSITIONALS, message, location=_locate())

    @classmethod
    def missing_flag_value(cls, name):
        return cls(ErrorKind.MISSING_FLAG_VALUE, f"Missing value for flag: --{name}", location=_locate())

    @classmethod
    def validation_failed(cls, name, reason):
        return cls(ErrorKind.VALIDATION_FAILED, f"Validation failed for {name}: {reason}", location=_locate())


__all__ = (
    "ErrorKind",
    "Location",
    "Error",
    "ResultAccessError",
)

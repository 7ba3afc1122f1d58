"""
Flagship results: the two-state return contract of every fallible operation.

A Result holds either a value (ok) or an Error (err), never both. Reading the
side that is not populated raises ResultAccessError, since it signals a bug in
the calling code rather than bad user input.

    >>> result = Result.ok(8080)
    >>> bool(result), result.value
    (True, 8080)
    >>> Result.err(Error.unknown_flag("--nope")).value_or(0)
    0
"""
from .faults import Error, ErrorKind, ResultAccessError
from .utils import Unset


class Result:
    """
    tagged union of {ok: value} or {err: Error}.

    construction
    - Result.ok(value=None): success; None stands in for "no payload".
    - Result.err(error): failure; error must be a real Error (kind != NONE).

    access
    - bool(result) / result.is_ok: which side is populated.
    - result.value / result.error: the payload, or ResultAccessError.
    - value_or(default), map(fn): convenience helpers.
    """
    __slots__ = ("_value", "_error")

    def __init__(self, *unused, **options):
        raise TypeError("use Result.ok() or Result.err() to build a result")

    @classmethod
    def _build(cls, value, error):
        self = object.__new__(cls)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_error", error)
        return self

    @classmethod
    def ok(cls, value=None, /):
        return cls._build(value, Unset)

    @classmethod
    def err(cls, error, /):
        if not isinstance(error, Error):
            raise TypeError("Result.err() argument must be an Error")
        if error.kind is ErrorKind.NONE:
            raise ValueError("Result.err() cannot carry an error of kind NONE")
        return cls._build(Unset, error)

    def __setattr__(self, name, value, /):
        raise AttributeError("'Result' object is immutable")

    @property
    def is_ok(self):
        return self._error is Unset

    @property
    def is_err(self):
        return self._error is not Unset

    def __bool__(self):
        return self._error is Unset

    @property
    def value(self):
        if self._error is not Unset:
            raise ResultAccessError(f"value accessed on a failed result ({self._error.message})")
        return self._value

    @property
    def error(self):
        if self._error is Unset:
            raise ResultAccessError("error accessed on a successful result")
        return self._error

    def value_or(self, default, /):
        return self._value if self._error is Unset else default

    def map(self, function, /):
        """
        apply function to the value of a successful result; failures pass through.
        """
        if self._error is not Unset:
            return self
        return Result.ok(function(self._value))

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return (self._value, self._error) == (other._value, other._error)

    def __hash__(self):
        return hash((type(self), self._error if self._error is not Unset else self._value))

    def __repr__(self):
        if self._error is Unset:
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"

    def __rich_repr__(self):
        if self._error is Unset:
            yield "value", self._value
        else:
            yield "error", self._error


__all__ = (
    "Result",
)

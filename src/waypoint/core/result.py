"""
Result envelope for explicit success/failure handling.

Provides the two-variant outcome ``Ok[T] | Err[E]``: exactly one state per
value, combinators to transform either side, and ``.q()``, the
short-circuit step of the propagation protocol (see
``waypoint.core.propagate``).

Errors usually travel as Traced values (``R[T]`` is ``Ok[T] | Err[Traced]``)
so every boundary a failure crosses is recorded, but Err accepts any error
type; conversion only happens where a ``@propagate`` boundary asks for it.

Manifesto:
    - **Explicit over Implicit:** failures are values, not hidden raises
    - **Short-circuit without boilerplate:** ``x = step().q()``
    - **Functional composition:** map/flat_map without nested try/except
    - **Batch-friendly:** collect_results() / partition_results()

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                   Result[T, E]  (Type Alias)                 │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[E]      │     Utilities           │
        │   (Success)     │   (Failure)     │                         │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: E      │ • try_result()          │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • or_else()     │ • partition_results()   │
        │ • q()           │ • q() → raise   │ • from_optional()       │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> Ok(10).map(lambda x: x * 2).map(lambda x: x + 1).unwrap()
    21
    >>> Err(ValueError("oops")).map(lambda x: x * 2).unwrap_or(0)
    0

    Pattern matching:

    >>> match Ok(5):
    ...     case Ok(v):
    ...         print(v)
    ...     case Err(e):
    ...         print("failed", e)
    5

Performance:
    - **Memory:** Ok/Err are frozen dataclasses with __slots__
    - **No overhead for success path:** map/flat_map on Err is a no-op

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or(), q() or pattern matching

    ❌ DON'T: Call q() outside a @propagate function
    ✅ DO: Decorate the function that should return the failure

Tags:
    result-pattern, error-handling, functional-programming, monadic, waypoint

Doc-Types:
    - API Reference
    - Error Handling Tutorial
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, overload

from waypoint.core.certain import link_err
from waypoint.core.errors import AggregateError, MissingValue, Propagation, UnwrapError
from waypoint.core.location import Location, track_caller
from waypoint.core.traced import Traced, into_traced

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful outcome containing a value.

    Transformations (map, flat_map) apply to the value; error-side operations
    (map_err, or_else, inspect_err) are no-ops that return self.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok("hello").map(str.upper).unwrap()
        'HELLO'
        >>> Ok(5).flat_map(lambda x: Ok(x) if x > 0 else Err(ValueError())).is_ok()
        True
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def is_ok_and(self, f: Callable[[T], bool]) -> bool:
        return f(self.value)

    def is_err_and(self, f: Callable[[Any], bool]) -> bool:
        return False

    def ok(self) -> T | None:
        return self.value

    def err(self) -> None:
        return None

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def expect(self, msg: str) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise UnwrapError(f"called unwrap_err() on an Ok value: {self.value!r}")

    def expect_err(self, msg: str) -> Any:
        raise UnwrapError(f"{msg}: {self.value!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T:
        return self.value

    def unwrap_unchecked(self) -> T:
        return self.value

    def unwrap_err_unchecked(self) -> Any:
        """Caller guarantees this is an Err; only checked while __debug__."""
        if __debug__:
            raise UnwrapError("called unwrap_err_unchecked() on an Ok value")
        return None

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def map_or(self, default: U, f: Callable[[T], U]) -> U:
        return f(self.value)

    def map_or_else(self, default: Callable[[Any], U], f: Callable[[T], U]) -> U:
        return f(self.value)

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Alias for flat_map."""
        return f(self.value)

    def and_(self, res: Result[U, E]) -> Result[U, E]:
        return res

    def or_(self, res: Result[T, F]) -> Ok[T]:
        return self

    def or_else(self, f: Callable[[Any], Result[T, F]]) -> Ok[T]:
        return self

    def inspect(self, f: Callable[[T], None]) -> Ok[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Any], None]) -> Ok[T]:
        return self

    def certain_ok(self) -> T:
        return self.value

    def certain_err(self) -> Any:
        link_err(f"certain_err() on Ok({self.value!r})")

    def q(self) -> T:
        """Propagation step: yield the value to the surrounding computation."""
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failed outcome containing an error.

    Err short-circuits transformations: map() and flat_map() return the same
    Err, and ``q()`` ends the enclosing ``@propagate`` function with it.
    Recovery goes through or_else(), unwrap_or() and friends.

    Examples:
        >>> Err(ValueError("x")).map(lambda x: x * 2).is_err()
        True
        >>> Err(ValueError("x")).or_else(lambda e: Ok("backup")).unwrap()
        'backup'
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def is_ok_and(self, f: Callable[[Any], bool]) -> bool:
        return False

    def is_err_and(self, f: Callable[[E], bool]) -> bool:
        return f(self.error)

    def ok(self) -> None:
        return None

    def err(self) -> E | None:
        return self.error

    def unwrap(self) -> Any:
        """Raise the error (or UnwrapError if it is not an exception)."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(f"called unwrap() on an Err value: {self.error!r}")

    def expect(self, msg: str) -> Any:
        cause = self.error if isinstance(self.error, BaseException) else None
        raise UnwrapError(f"{msg}: {self.error!r}", cause=cause)

    def unwrap_err(self) -> E:
        return self.error

    def expect_err(self, msg: str) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return f(self.error)

    def unwrap_unchecked(self) -> Any:
        """Caller guarantees this is an Ok; only checked while __debug__."""
        if __debug__:
            raise UnwrapError("called unwrap_unchecked() on an Err value")
        return None

    def unwrap_err_unchecked(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        """No-op for Err."""
        return self

    def map_or(self, default: U, f: Callable[[Any], U]) -> U:
        return default

    def map_or_else(self, default: Callable[[E], U], f: Callable[[Any], U]) -> U:
        return default(self.error)

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Transform the error."""
        return Err(f(self.error))

    def flat_map(self, f: Callable[[Any], Any]) -> Err[E]:
        """No-op for Err."""
        return self

    def and_then(self, f: Callable[[Any], Any]) -> Err[E]:
        """No-op for Err."""
        return self

    def and_(self, res: Result[U, E]) -> Err[E]:
        return self

    def or_(self, res: Result[T, F]) -> Result[T, F]:
        return res

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[Any], None]) -> Err[E]:
        return self

    def inspect_err(self, f: Callable[[E], None]) -> Err[E]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def certain_ok(self) -> Any:
        link_err(f"certain_ok() on Err({self.error!r})")

    def certain_err(self) -> E:
        return self.error

    @track_caller
    def q(self) -> Any:
        """Propagation step: end the enclosing @propagate function with this error."""
        raise Propagation(self.error, Location.caller())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        to_dict = getattr(self.error, "to_dict", None)
        if callable(to_dict):
            return {"ok": False, "error": to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type aliases
Result = Ok[T] | Err[E]
R = Ok[T] | Err[Traced]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result(f: Callable[[], T]) -> Result[T, Exception]:
    """
    Execute a function and wrap its outcome.

    The bridge from "return or raise" code: a return value becomes Ok, any
    Exception becomes Err holding that same exception object, so
    ``try_result(f).unwrap()`` raises exactly what ``f()`` raised.

    Examples:
        >>> import json
        >>> try_result(lambda: json.loads('{"a": 1}')).unwrap()
        {'a': 1}
        >>> try_result(lambda: json.loads('invalid')).is_err()
        True

    Args:
        f: Zero-argument callable that may raise exceptions

    Returns:
        Ok[T] if f() succeeds, Err with the exception if f() raises
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def try_result_with(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], F] | None = None,
) -> Result[T, Any]:
    """
    Execute function and map exceptions to custom error values.

    Like try_result(), but the caught exception is passed through
    ``error_mapper`` first. ``error_mapper=into_traced`` starts a trace at
    the failing call.

    Args:
        f: Zero-argument callable that may raise exceptions
        error_mapper: Optional function to transform exceptions

    Returns:
        Ok[T] if f() succeeds, Err with mapped exception if f() raises
    """
    try:
        return Ok(f())
    except Exception as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


def collect_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Examples:
        >>> collect_results([Ok(1), Ok(2), Ok(3)]).unwrap()
        [1, 2, 3]
        >>> str(collect_results([Ok(1), Err(ValueError("a")), Err(ValueError("b"))]).error)
        'a'
    """
    values = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


def collect_all_errors(results: list[Result[T, Any]]) -> Result[list[T], Any]:
    """
    Collect results, accumulating ALL errors for comprehensive reporting.

    A single error is returned as-is; two or more are combined into an
    AggregateError whose ``errors`` keeps every original error in order.

    Examples:
        >>> err = collect_all_errors([Ok(1), Err(ValueError("a")), Err(ValueError("b"))])
        >>> str(err.error)
        'Multiple errors (2): a; b'
    """
    values = []
    errors = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)

    if errors:
        if len(errors) == 1:
            return Err(errors[0])
        return Err(AggregateError(errors))

    return Ok(values)


def partition_results(
    results: list[Result[T, E]],
) -> tuple[list[T], list[E]]:
    """Partition results into (successful values, errors)."""
    values = []
    errors = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


@overload
def from_optional(value: None, error: E | None = None) -> Err[Any]: ...

@overload
def from_optional(value: T, error: E | None = None) -> Ok[T]: ...

@track_caller
def from_optional(value: T | None, error: E | None = None) -> Result[T, Any]:
    """
    Convert optional value to Result.

    ``None`` becomes ``Err(error)``; without an explicit error it becomes a
    Traced MissingValue (renders ``None``) located at the caller.

    Examples:
        >>> from_optional({"a": 1}.get("a")).unwrap()
        1
        >>> str(from_optional(None).error.original)
        'None'
    """
    if value is None:
        if error is None:
            return Err(into_traced(MissingValue()))
        return Err(error)
    return Ok(value)


def from_bool(
    condition: bool,
    ok_value: T,
    error: E,
) -> Result[T, E]:
    """
    Create Result from boolean condition.

    Examples:
        >>> from_bool(18 >= 18, 18, ValueError("Must be 18 or older")).unwrap()
        18
    """
    if condition:
        return Ok(ok_value)
    return Err(error)


__all__ = [
    # Types
    "Result",
    "R",
    "Ok",
    "Err",
    # Constructors
    "try_result",
    "try_result_with",
    "from_optional",
    "from_bool",
    # Collectors
    "collect_results",
    "collect_all_errors",
    "partition_results",
]

"""
Short-circuit propagation: the ``?`` step for outcomes.

Inside a function decorated with ``@propagate``, ``outcome.q()`` either hands
back the success value or ends the function right there, returning a failure
in the function's own error type. The error is converted on the way out, and
with the default ``into=Traced`` that conversion records the ``.q()`` line:

    @propagate
    def load(path: str) -> R[Config]:
        text = read(path).q()          # Err here -> return Err(Traced)
        data = parse(text).q()
        return Ok(Config(**data))

Three sources feed the same conversion:

    - outcomes:   ``step().q()``
    - optionals:  ``q(mapping.get(key))``; None fails with MissingValue
    - raises:     exceptions listed in ``catch=`` escaping the body, located
      at the body line they escaped from

Manifesto:
    - **Zero boilerplate:** one ``.q()`` per fallible step
    - **Provenance for free:** every boundary adds one location
    - **Never double-wrap:** a Traced passing through only grows its stack

Architecture:
    ::

        caller()                      @propagate(into=Traced)
          └── load()  ─────────────── except Propagation as signal:
                └── read(path).q()        return Err(into_traced(signal.error,
                      raise Propagation                    signal.location))
                        (error, location)

        into=Traced   -> into_traced(error, location)
        into=None     -> error unchanged
        into=callable -> into(error)

Examples:
    >>> @propagate
    ... def half(n: int) -> R[int]:
    ...     even = (Ok(n) if n % 2 == 0 else Err(ValueError("odd"))).q()
    ...     return Ok(even // 2)
    >>> half(4)
    Ok(2)
    >>> len(half(3).error.locations)
    1

Guardrails:
    ❌ DON'T: Catch Propagation (or BaseException) inside a boundary
    ✅ DO: Match on the outcome when the failure can be handled locally

    ❌ DON'T: Call q() where no @propagate function is on the stack
    ✅ DO: Decorate the function whose return value should carry the failure

Tags:
    propagation, short-circuit, decorator, waypoint

Doc-Types:
    - API Reference
    - Error Handling Tutorial
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, TypeVar, overload

from waypoint.core.errors import MissingValue, Propagation
from waypoint.core.location import Location, track_caller
from waypoint.core.result import Err, Ok
from waypoint.core.traced import Traced, into_traced

Fn = TypeVar("Fn", bound=Callable[..., Any])

Converter = Callable[[Any, Location], Any]


def _converter(into: Any) -> Converter:
    if into is Traced:
        return into_traced
    if into is None:
        return lambda error, location: error
    if callable(into):
        return lambda error, location: into(error)
    raise TypeError(f"into= must be Traced, None or a callable, got {into!r}")


def _escape_location(exc: BaseException) -> Location:
    # The first traceback entry is the boundary wrapper, the second is the
    # decorated function's frame at the line the exception passed through.
    tb = exc.__traceback__
    if tb is not None and tb.tb_next is not None:
        return Location.from_traceback(tb.tb_next)
    return Location.caller()


@overload
def propagate(func: Fn) -> Fn: ...

@overload
def propagate(
    func: None = None,
    *,
    into: Any = Traced,
    catch: type[BaseException] | tuple[type[BaseException], ...] = (),
) -> Callable[[Fn], Fn]: ...

def propagate(
    func: Callable[..., Any] | None = None,
    *,
    into: Any = Traced,
    catch: type[BaseException] | tuple[type[BaseException], ...] = (),
) -> Any:
    """
    Mark a function as a propagation boundary.

    A failure short-circuited by ``.q()`` / ``q()`` inside the body, or an
    exception of a ``catch`` type escaping it, is converted with ``into`` and
    returned as ``Err``. Everything else (including the normal return value)
    passes through untouched. Works on ``async def`` functions.

    Args:
        func: The function, when used as bare ``@propagate``
        into: ``Traced`` (record the boundary), ``None`` (keep the error
            as-is) or a one-argument converter
        catch: Exception type(s) to turn into failures

    Returns:
        The wrapped function (or a decorator when called with options)
    """
    if func is None:
        return functools.partial(propagate, into=into, catch=catch)

    convert = _converter(into)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_boundary(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Propagation as signal:
                return Err(convert(signal.error, signal.location))
            except catch as exc:
                return Err(convert(exc, _escape_location(exc)))

        return async_boundary

    @functools.wraps(func)
    def boundary(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Propagation as signal:
            return Err(convert(signal.error, signal.location))
        except catch as exc:
            return Err(convert(exc, _escape_location(exc)))

    return boundary


@track_caller
def q(source: Any) -> Any:
    """
    Propagation step for any supported source.

    Outcomes behave like ``source.q()``. ``None`` fails with MissingValue;
    any other value is a present optional and is returned unchanged.
    """
    match source:
        case Ok() | Err():
            return source.q()
        case None:
            raise Propagation(MissingValue(), Location.caller())
        case _:
            return source


__all__ = [
    "propagate",
    "q",
]

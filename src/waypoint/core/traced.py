"""
Traced errors: an original exception plus the boundaries it crossed.

A Traced owns exactly one original exception and an ordered list of
Locations. The first location is where the original was wrapped (deepest
frame); every later boundary appends to the end. Rendering walks the list in
reverse, so the boundary closest to the top-level caller prints first.

Conversion into a Traced goes through one entry point, ``into_traced()``,
which pattern-matches two mutually exclusive cases:

    - already a Traced   -> ``append_location()``: new container, same
      original, one more location
    - any other exception -> ``wrap_fresh()``: new container, one location

Traced is final, so "already traced" is one concrete type and the two rules
can never both apply. ``wrap_fresh()`` refuses a Traced and
``append_location()`` refuses anything else; a Traced is never nested inside
another.

Manifesto:
    - **Zero-effort provenance:** locations are captured, never passed in
    - **Wrap once:** one original per Traced, for its whole life
    - **Closest first:** display order is most recent boundary first

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────┐
        │                         Traced                           │
        ├─────────────────────────────────────────────────────────┤
        │  original: Exception      (never replaced)               │
        │  locations: [A, B, C]     (append only)                  │
        ├─────────────────────────────────────────────────────────┤
        │  str() / repr():                                         │
        │      <original>                                          │
        │      C                                                   │
        │      B                                                   │
        │      A                                                   │
        └─────────────────────────────────────────────────────────┘

        into_traced(e)
            ├── case Traced()    -> append_location(e, here)
            ├── case Exception() -> wrap_fresh(e, here)
            └── case _           -> ConversionError

Examples:
    Wrapping a fresh error:

    >>> t = into_traced(ValueError("bad input"))
    >>> len(t.locations)
    1
    >>> str(t.original)
    'bad input'

    Passing an existing Traced through another boundary:

    >>> moved = into_traced(t)
    >>> moved.original is t.original, len(moved.locations), len(t.locations)
    (True, 2, 1)

    Ad hoc errors from text:

    >>> str(anyway("missing key %r", "id").original)
    "missing key 'id'"

Guardrails:
    ❌ DON'T: Build Traced(Traced(...)) by hand
    ✅ DO: Route every conversion through into_traced()

    ❌ DON'T: Subclass Traced
    ✅ DO: Subclass WaypointError (or any Exception) and let it be wrapped

Tags:
    traced-error, provenance, conversion-dispatch, waypoint

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from typing import Any, final

from waypoint.core.errors import ConversionError, Message
from waypoint.core.location import Location, track_caller


@final
class Traced(Exception):
    """
    An exception plus the ordered list of locations it propagated through.

    Attributes:
        locations: Append-ordered call sites, deepest first
        original: The wrapped exception (read-only)
        source: Alias of ``original`` for chained inspection
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        raise TypeError("Traced cannot be subclassed")

    @track_caller
    def __init__(
        self,
        original: Exception,
        locations: list[Location] | None = None,
    ):
        if isinstance(original, Traced):
            raise ConversionError("a Traced error cannot wrap another Traced; use into_traced()")
        super().__init__(original)
        self._original = original
        self.locations: list[Location] = (
            [Location.caller()] if locations is None else list(locations)
        )
        self.__cause__ = original
        self.__suppress_context__ = True

    @property
    def original(self) -> Exception:
        return self._original

    @property
    def source(self) -> Exception:
        return self._original

    @classmethod
    @track_caller
    def from_error(cls, error: Exception) -> Traced:
        """Classmethod spelling of ``into_traced(error)``."""
        return into_traced(error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging. Locations are most recent first."""
        return {
            "error_type": type(self._original).__name__,
            "message": str(self._original),
            "locations": [str(loc) for loc in reversed(self.locations)],
        }

    def __str__(self) -> str:
        parts = [f"{self._original}\n"]
        parts.extend(f"{loc}\n" for loc in reversed(self.locations))
        return "".join(parts)

    # Debug rendering is the display rendering.
    __repr__ = __str__

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self._original, self.locations))


@track_caller
def wrap_fresh(error: Exception, location: Location | None = None) -> Traced:
    """Start a new Traced around ``error`` with ``location`` as its only entry."""
    if isinstance(error, Traced):
        raise ConversionError("wrap_fresh() received a Traced; use append_location()")
    if location is None:
        location = Location.caller()
    return Traced(error, [location])


@track_caller
def append_location(traced: Traced, location: Location | None = None) -> Traced:
    """
    Record one more boundary on top of ``traced``.

    Returns a new Traced holding the same original and the trail of
    ``traced`` plus ``location``. ``traced`` itself is left unchanged, so an
    outcome propagated by two sibling boundaries keeps its own trail.
    """
    if not isinstance(traced, Traced):
        raise ConversionError(
            f"append_location() needs a Traced, got {type(traced).__name__}"
        )
    if location is None:
        location = Location.caller()
    return Traced(traced.original, [*traced.locations, location])


@track_caller
def into_traced(error: Any, location: Location | None = None) -> Traced:
    """
    Convert ``error`` into a Traced, recording ``location`` (default: caller).

    Args:
        error: A Traced (gets a location appended) or any other exception
            (gets wrapped)
        location: Boundary to record; captured from the call site when omitted

    Returns:
        The Traced carrying ``error``'s original

    Raises:
        ConversionError: ``error`` is not an exception
    """
    if location is None:
        location = Location.caller()
    match error:
        case Traced():
            return append_location(error, location)
        case Exception():
            return wrap_fresh(error, location)
        case _:
            raise ConversionError(
                f"cannot trace a {type(error).__name__}: only exceptions can be traced"
            )


@track_caller
def anyway(message: str, *args: Any) -> Traced:
    """Traced error whose original renders ``message % args`` (or ``message``)."""
    text = message % args if args else message
    return into_traced(Message(text))


__all__ = [
    "Traced",
    "wrap_fresh",
    "append_location",
    "into_traced",
    "anyway",
]

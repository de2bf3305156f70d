"""
Error types for the waypoint core.

Everything waypoint itself raises or builds derives from WaypointError, which
carries a message, an optional chained cause and a ``to_dict()`` for
structured logging. Two subclasses are ordinary domain failures that end up
wrapped inside a Traced error: MissingValue (an absent optional was
propagated) and Message (an ad hoc error built from text by ``anyway``).

The remaining types signal misuse: UnwrapError for unwrapping the wrong
state, ConversionError for offering a non-exception to the traced
conversion.

Propagation is not an error at all. It is the control-flow signal raised by
``.q()`` and caught by the nearest ``@propagate`` boundary, and it derives
from BaseException so an ``except Exception`` inside a boundary cannot
swallow a failure on its way out.

Architecture:
    ::

        BaseException
        ├── Propagation              (signal: error + location)
        └── Exception
            └── WaypointError        (message, cause, to_dict)
                ├── MissingValue     str() == "None"
                ├── Message          str() == text
                ├── AggregateError   (collect_all_errors)
                ├── UnwrapError
                └── ConversionError  (also a TypeError)

Examples:
    >>> str(MissingValue())
    'None'
    >>> str(Message("disk full"))
    'disk full'
    >>> UnwrapError("bad state").to_dict()["error_type"]
    'UnwrapError'

Guardrails:
    ❌ DON'T: Catch Propagation in user code
    ✅ DO: Let @propagate turn it into an Err

Tags:
    error-handling, exception-hierarchy, waypoint

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from waypoint.core.location import Location


class WaypointError(Exception):
    """
    Base exception for errors raised or built by waypoint.

    Attributes:
        message: Human-readable description, also the ``str()`` of the error
        cause: Optional underlying exception, chained as ``__cause__``
    """

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class MissingValue(WaypointError):
    """Marker failure for an absent optional value."""

    def __init__(self) -> None:
        super().__init__("None")

    def __repr__(self) -> str:
        return "MissingValue"


class Message(WaypointError):
    """Ad hoc failure whose display text is exactly ``message``."""


class AggregateError(WaypointError):
    """Several failures collected into one; ``errors`` keeps them in order."""

    def __init__(self, errors: list[Any]):
        messages = [str(e) for e in errors]
        summary = "; ".join(messages[:3]) + ("..." if len(messages) > 3 else "")
        super().__init__(f"Multiple errors ({len(errors)}): {summary}")
        self.errors = list(errors)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error_count"] = len(self.errors)
        result["errors"] = [str(e) for e in self.errors]
        return result


class UnwrapError(WaypointError):
    """Raised when unwrap/expect is called on the wrong state."""


class ConversionError(WaypointError, TypeError):
    """Raised when a value that is not an exception is converted into a Traced."""


class Propagation(BaseException):
    """
    Short-circuit signal carrying a failure to the nearest boundary.

    Raised by ``.q()`` on a failed outcome (or ``q(None)``) and caught by
    ``@propagate``, which converts ``error`` into its declared error type.
    ``location`` is the ``.q()`` call site.
    """

    def __init__(self, error: Any, location: Location):
        super().__init__(error, location)
        self.error = error
        self.location = location

    def __str__(self) -> str:
        return (
            f"failure propagated outside a @propagate boundary at {self.location}: "
            f"{self.error!r}"
        )


__all__ = [
    "WaypointError",
    "MissingValue",
    "Message",
    "AggregateError",
    "UnwrapError",
    "ConversionError",
    "Propagation",
]

"""
Source locations for propagation boundaries.

A Location is the (file, line, column) triple of one call site. Traced errors
collect one Location per boundary they cross, and the caller never has to
supply it: ``Location.caller()`` reads the interpreter frame stack.

Helpers that capture a location on behalf of their caller are marked with
``@track_caller``. Capture walks outward past every marked frame, so a chain
of helpers (``Err.q()`` -> ``into_traced()`` -> ``wrap_fresh()``) still
reports the user's line, not a line inside waypoint.

Architecture:
    ::

        user_fn()           <- reported location (first unmarked frame)
          └── Err.q()       @track_caller
                └── Location.caller()

Examples:
    >>> loc = Location("app.py", 12, 5)
    >>> str(loc)
    'app.py:12:5'

Tags:
    location, call-site, frames, waypoint

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from types import CodeType, FrameType, TracebackType
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

# Code objects of functions whose frames are skipped by Location.caller().
_TRACKED: set[CodeType] = set()


def track_caller(func: F) -> F:
    """Mark ``func`` so locations captured inside it report its caller."""
    _TRACKED.add(func.__code__)
    return func


def is_tracked(func: Callable[..., Any]) -> bool:
    code = getattr(func, "__code__", None)
    return code in _TRACKED


@dataclass(frozen=True, slots=True)
class Location:
    """One recorded call site. ``column`` is 1-based, 0 when unknown."""

    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}

    @classmethod
    def caller(cls) -> Location:
        """
        Location of the nearest frame that is not marked ``@track_caller``.

        Called from an unmarked function this is the line of the
        ``Location.caller()`` call itself; called from a marked function it is
        the line that called that function, recursively.
        """
        frame: FrameType | None = sys._getframe(1)
        while frame is not None and frame.f_code in _TRACKED:
            frame = frame.f_back
        if frame is None:
            # Every frame on the stack is marked.
            return cls("<unknown>", 0, 0)
        return cls._from_frame_or_traceback(frame)

    @classmethod
    def from_frame(cls, frame: FrameType) -> Location:
        return cls._from_frame_or_traceback(frame)

    @classmethod
    def from_traceback(cls, tb: TracebackType) -> Location:
        """Location of the instruction a traceback entry points at."""
        return cls._from_frame_or_traceback(tb)

    @classmethod
    def _from_frame_or_traceback(cls, target: FrameType | TracebackType) -> Location:
        # context=0 keeps inspect from reading the source file.
        info = inspect.getframeinfo(target, context=0)
        positions = info.positions
        column = 0
        if positions is not None and positions.col_offset is not None:
            column = positions.col_offset + 1
        return cls(info.filename, info.lineno or 0, column)


__all__ = [
    "Location",
    "track_caller",
    "is_tracked",
]

"""
Infallible assertions over outcomes.

``certain_ok`` / ``certain_err`` extract the payload of an outcome that the
program has already proven to be in one particular state. If the proof is
wrong the process does not continue: ``link_err()`` is called, which logs a
critical event and terminates through the process-wide abort hook. Nothing is
raised, so nothing can catch it.

The hook is supplied by the surrounding program (``set_abort_hook``) and
defaults to ``os.abort``. A hook that returns is treated as broken and the
process is aborted anyway.

Examples:
    >>> certain_ok(Ok(3))
    3
    >>> certain_err(Err(KeyError("k")))
    KeyError('k')

Guardrails:
    ❌ DON'T: Use certain_ok() for failures that can happen at runtime
    ✅ DO: Use unwrap()/expect() or pattern matching for those

Tags:
    assertion, abort, invariant, waypoint
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Any, Callable, NoReturn, TypeVar

from waypoint.core.logging import get_logger

if TYPE_CHECKING:
    from waypoint.core.result import Err, Ok

T = TypeVar("T")
E = TypeVar("E")

logger = get_logger(__name__)

AbortHook = Callable[[], Any]

_abort_hook: AbortHook = os.abort


def set_abort_hook(hook: AbortHook) -> AbortHook:
    """Install the routine ``link_err()`` calls; returns the previous one."""
    global _abort_hook
    previous = _abort_hook
    _abort_hook = hook
    return previous


def get_abort_hook() -> AbortHook:
    return _abort_hook


def link_err(detail: str | None = None) -> NoReturn:
    """Terminate the process after a violated certainty. Never returns."""
    logger.critical("certain_violated", detail=detail)
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        _abort_hook()
    finally:
        os.abort()
    raise AssertionError("unreachable")  # pragma: no cover


def certain_ok(outcome: Ok[T] | Err[Any]) -> T:
    """Value of an outcome known to be Ok; aborts the process otherwise."""
    return outcome.certain_ok()


def certain_err(outcome: Ok[Any] | Err[E]) -> E:
    """Error of an outcome known to be Err; aborts the process otherwise."""
    return outcome.certain_err()


__all__ = [
    "certain_ok",
    "certain_err",
    "link_err",
    "set_abort_hook",
    "get_abort_hook",
]

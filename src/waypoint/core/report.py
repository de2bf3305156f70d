"""
The program edge: what happens to a failure nobody handled.

A failure that reaches the top of the program is rendered with its display
contract (original message, then the location trail, most recent boundary
first), logged once as ``unhandled_failure``, and turned into an exit
status.

Examples:
    def main() -> None:
        configure_from_settings()
        config = exit_on_err(load_config("app.toml"))
        ...

Tags:
    reporting, exit-status, program-edge, waypoint
"""

from __future__ import annotations

import sys
from typing import Any, TypeVar

from waypoint.core.logging import get_logger
from waypoint.core.result import Err, Ok, Result
from waypoint.core.settings import get_settings

T = TypeVar("T")

logger = get_logger(__name__)


def render(error: Any) -> str:
    """Display text of ``error``, always newline-terminated."""
    text = str(error)
    return text if text.endswith("\n") else f"{text}\n"


def describe(error: Any) -> dict[str, Any]:
    """Structured fields for logging ``error``."""
    to_dict = getattr(error, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"error_type": type(error).__name__, "message": str(error)}


def log_failure(
    outcome: Result[T, Any],
    log: Any = None,
    event: str = "unhandled_failure",
) -> Result[T, Any]:
    """Log the error of an Err outcome; returns the outcome unchanged."""
    if isinstance(outcome, Err):
        (log or logger).error(event, **describe(outcome.error))
    return outcome


def exit_on_err(outcome: Result[T, Any], status: int | None = None) -> T:
    """
    Value of an Ok outcome, or render the failure and exit.

    Args:
        outcome: The outcome that reached the program edge
        status: Exit status on failure (default: ``settings.exit_status``)

    Raises:
        SystemExit: ``outcome`` is an Err
    """
    match outcome:
        case Ok(value):
            return value
        case Err(error):
            log_failure(outcome)
            sys.stderr.write(render(error))
            sys.stderr.flush()
            raise SystemExit(status if status is not None else get_settings().exit_status)
    raise TypeError(f"exit_on_err() needs an Ok or Err, got {type(outcome).__name__}")


__all__ = [
    "render",
    "describe",
    "log_failure",
    "exit_on_err",
]

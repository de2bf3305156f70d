"""Waypoint Core -- outcomes and errors that remember where they have been.

Manifesto:
    Returning failures as values makes error paths explicit, but a failure
    that surfaces three layers up usually says *what* went wrong and not
    *where* it travelled.  ``waypoint.core`` pairs a two-variant outcome with
    a traced error that picks up one source location at every boundary it is
    propagated through, with no effort from the caller.

    - **Explicit failures:** ``Ok`` / ``Err`` values, never hidden raises
    - **One-step propagation:** ``value = step().q()`` inside ``@propagate``
    - **Automatic provenance:** each boundary appends ``file:line:column``
    - **Wrap once:** an already-traced error is never wrapped again

Architecture::

    Layer 1 -- Values
        location.py        Location record + @track_caller frame skipping
        errors.py          WaypointError hierarchy + Propagation signal
        traced.py          Traced container + into_traced() dispatch + anyway()
        result.py          Ok / Err / Result / R + constructors and collectors

    Layer 2 -- Protocol
        propagate.py       .q() / q() short-circuit + @propagate boundaries
        certain.py         certain_ok() / certain_err() + process abort hook

    Layer 3 -- Program edge
        report.py          render / log_failure / exit_on_err
        logging.py         structlog configuration
        settings.py        WaypointSettings (pydantic-settings)

Examples:
    >>> from waypoint.core import Ok, Err, R, propagate
    >>> @propagate
    ... def parse_port(raw: str) -> R[int]:
    ...     port = (Ok(int(raw)) if raw.isdigit() else Err(ValueError(raw))).q()
    ...     return Ok(port)
    >>> parse_port("8080")
    Ok(8080)

Tags:
    result-pattern, error-handling, provenance, waypoint

Doc-Types:
    - API Reference
    - Package Overview
"""

from waypoint.core.certain import (
    certain_err,
    certain_ok,
    get_abort_hook,
    link_err,
    set_abort_hook,
)
from waypoint.core.errors import (
    AggregateError,
    ConversionError,
    Message,
    MissingValue,
    Propagation,
    UnwrapError,
    WaypointError,
)
from waypoint.core.location import Location, track_caller
from waypoint.core.propagate import propagate, q
from waypoint.core.report import describe, exit_on_err, log_failure, render
from waypoint.core.result import (
    Err,
    Ok,
    R,
    Result,
    collect_all_errors,
    collect_results,
    from_bool,
    from_optional,
    partition_results,
    try_result,
    try_result_with,
)
from waypoint.core.traced import (
    Traced,
    anyway,
    append_location,
    into_traced,
    wrap_fresh,
)

__all__ = [
    # Outcome
    "Ok",
    "Err",
    "Result",
    "R",
    "try_result",
    "try_result_with",
    "from_optional",
    "from_bool",
    "collect_results",
    "collect_all_errors",
    "partition_results",
    # Propagation
    "propagate",
    "q",
    # Traced errors
    "Traced",
    "Location",
    "track_caller",
    "into_traced",
    "wrap_fresh",
    "append_location",
    "anyway",
    # Errors
    "WaypointError",
    "MissingValue",
    "Message",
    "AggregateError",
    "UnwrapError",
    "ConversionError",
    "Propagation",
    # Assertions
    "certain_ok",
    "certain_err",
    "link_err",
    "set_abort_hook",
    "get_abort_hook",
    # Program edge
    "render",
    "describe",
    "log_failure",
    "exit_on_err",
]

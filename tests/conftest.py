"""
Shared pytest fixtures and configuration for waypoint tests.

This module provides:
- src/ on sys.path so the package imports without installation
- Abort-hook, settings-cache and structlog-configuration isolation
- A helper for running snippets in a child interpreter (abort tests)
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

SRC = Path(__file__).parent.parent / "src"

# Ensure waypoint package is importable
sys.path.insert(0, str(SRC))

from waypoint.core.certain import get_abort_hook, set_abort_hook
from waypoint.core.logging import clear_context
from waypoint.core.settings import clear_settings_cache


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def restore_abort_hook() -> Generator[None, None, None]:
    """Put back whatever abort hook was installed before the test."""
    previous = get_abort_hook()
    yield
    set_abort_hook(previous)


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    clear_context()
    yield
    clear_context()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Drop any structlog configuration (and logger caching) a test installed."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


# =============================================================================
# Subprocess Helper
# =============================================================================


@pytest.fixture
def run_snippet():
    """
    Run Python source in a fresh interpreter with waypoint importable.

    Returns the CompletedProcess; used where the expected outcome is process
    termination, which cannot be observed in-process.
    """

    def _run(source: str, timeout: float = 30.0) -> subprocess.CompletedProcess:
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            [str(SRC)] + ([env["PYTHONPATH"]] if env.get("PYTHONPATH") else [])
        )
        env.pop("PYTHONFAULTHANDLER", None)
        return subprocess.run(
            [sys.executable, "-c", source],
            capture_output=True,
            text=True,
            env=env,
            timeout=timeout,
        )

    return _run

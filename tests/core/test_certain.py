"""Tests for waypoint.core.certain.

A violated certainty terminates the process, so every mismatch case runs in
a child interpreter and is judged by its exit status.
"""

import signal
import sys
import textwrap

import pytest

from waypoint.core.certain import (
    certain_err,
    certain_ok,
    get_abort_hook,
    set_abort_hook,
)
from waypoint.core.result import Err, Ok

ABORTED = -signal.SIGABRT if hasattr(signal, "SIGABRT") else None

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="abort status is POSIX-specific")


class TestCertainHolds:
    def test_certain_ok_returns_value(self):
        payload = object()
        assert certain_ok(Ok(payload)) is payload

    def test_certain_err_returns_error(self):
        error = KeyError("k")
        assert certain_err(Err(error)) is error

    def test_method_forms(self):
        assert Ok(3).certain_ok() == 3
        assert Err("e").certain_err() == "e"

    def test_does_not_call_hook(self):
        calls = []
        set_abort_hook(lambda: calls.append(True))
        certain_ok(Ok(1))
        certain_err(Err(1))
        assert calls == []


class TestAbortHook:
    def test_set_returns_previous(self):
        def first():
            pass

        def second():
            pass

        set_abort_hook(first)
        assert set_abort_hook(second) is first
        assert get_abort_hook() is second


@pytest.mark.slow
@posix_only
class TestCertainViolated:
    def _script(self, body: str) -> str:
        return textwrap.dedent(
            """
            import os
            from waypoint.core import Err, Ok, certain_err, certain_ok, set_abort_hook
            """
        ) + textwrap.dedent(body)

    def test_certain_ok_on_err_aborts(self, run_snippet):
        proc = run_snippet(self._script(
            """
            certain_ok(Err(ValueError("boom")))
            print("continued")
            """
        ))
        assert proc.returncode == ABORTED
        assert "continued" not in proc.stdout
        assert "certain_violated" in proc.stdout

    def test_certain_err_on_ok_aborts(self, run_snippet):
        proc = run_snippet(self._script(
            """
            certain_err(Ok(1))
            print("continued")
            """
        ))
        assert proc.returncode == ABORTED
        assert "continued" not in proc.stdout

    def test_hook_decides_how_to_terminate(self, run_snippet):
        proc = run_snippet(self._script(
            """
            set_abort_hook(lambda: os._exit(3))
            certain_ok(Err("nope"))
            print("continued")
            """
        ))
        assert proc.returncode == 3
        assert "continued" not in proc.stdout

    def test_returning_hook_still_aborts(self, run_snippet):
        proc = run_snippet(self._script(
            """
            calls = []
            set_abort_hook(lambda: calls.append(1))
            certain_ok(Err("nope"))
            print("continued")
            """
        ))
        assert proc.returncode == ABORTED
        assert "continued" not in proc.stdout

    def test_raising_hook_still_aborts(self, run_snippet):
        proc = run_snippet(self._script(
            """
            def hook():
                raise RuntimeError("hook failed")

            set_abort_hook(hook)
            try:
                certain_ok(Err("nope"))
            except RuntimeError:
                print("caught")
            """
        ))
        assert proc.returncode == ABORTED
        assert "caught" not in proc.stdout

    def test_not_caught_by_except(self, run_snippet):
        proc = run_snippet(self._script(
            """
            try:
                certain_ok(Err("nope"))
            except BaseException:
                print("caught")
            """
        ))
        assert proc.returncode == ABORTED
        assert "caught" not in proc.stdout

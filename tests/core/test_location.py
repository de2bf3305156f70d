"""Tests for waypoint.core.location module."""

import sys

import pytest

from waypoint.core.location import Location, is_tracked, track_caller


def _here() -> int:
    """Line number of the caller."""
    return sys._getframe(1).f_lineno


@track_caller
def tracked_helper() -> Location:
    return Location.caller()


@track_caller
def tracked_outer() -> Location:
    return tracked_helper()


def untracked_helper() -> Location:
    return Location.caller()


class TestLocation:
    def test_str(self):
        assert str(Location("pkg/mod.py", 12, 5)) == "pkg/mod.py:12:5"

    def test_to_dict(self):
        assert Location("a.py", 1, 2).to_dict() == {"file": "a.py", "line": 1, "column": 2}

    def test_frozen(self):
        loc = Location("a.py", 1, 2)
        with pytest.raises(Exception):
            loc.line = 3

    def test_equality_and_hash(self):
        assert Location("a.py", 1, 2) == Location("a.py", 1, 2)
        assert len({Location("a.py", 1, 2), Location("a.py", 1, 2)}) == 1


class TestCaller:
    def test_direct_call_reports_own_line(self):
        line = _here() + 1
        loc = Location.caller()
        assert loc.file == __file__
        assert loc.line == line
        assert loc.column >= 1

    def test_tracked_function_reports_its_caller(self):
        line = _here() + 1
        loc = tracked_helper()
        assert loc.file == __file__
        assert loc.line == line

    def test_tracked_chain_reports_outermost_caller(self):
        line = _here() + 1
        loc = tracked_outer()
        assert loc.line == line

    def test_untracked_function_reports_itself(self):
        loc = untracked_helper()
        assert loc.line == untracked_helper.__code__.co_firstlineno + 1

    def test_column_distinguishes_calls_on_one_line(self):
        a, b = tracked_helper(), tracked_helper()
        assert a.line == b.line
        assert a.column < b.column


class TestTrackCaller:
    def test_marks_function(self):
        assert is_tracked(tracked_helper)
        assert not is_tracked(untracked_helper)

    def test_returns_same_function(self):
        def f():
            return 1

        assert track_caller(f) is f


class TestFromTraceback:
    def test_points_at_raise_line(self):
        line = _here() + 2
        try:
            raise ValueError("x")
        except ValueError as exc:
            loc = Location.from_traceback(exc.__traceback__)
        assert loc.file == __file__
        assert loc.line == line

    def test_from_frame(self):
        frame = sys._getframe()
        line = _here() + 1
        loc = Location.from_frame(frame)
        assert loc.line == line

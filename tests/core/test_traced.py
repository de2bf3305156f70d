"""Tests for waypoint.core.traced: container, dispatch and rendering."""

import pickle
import sys

import pytest

from waypoint.core.errors import ConversionError, Message
from waypoint.core.location import Location
from waypoint.core.traced import (
    Traced,
    anyway,
    append_location,
    into_traced,
    wrap_fresh,
)

A = Location("deep.py", 10, 5)
B = Location("middle.py", 20, 9)
C = Location("top.py", 30, 1)


def _here() -> int:
    return sys._getframe(1).f_lineno


class TestWrapFresh:
    def test_single_location(self):
        error = ValueError("bad input")
        traced = wrap_fresh(error, A)
        assert traced.locations == [A]
        assert traced.original is error
        assert str(traced.original) == str(error)

    def test_captures_caller_when_location_omitted(self):
        line = _here() + 1
        traced = wrap_fresh(KeyError("k"))
        [loc] = traced.locations
        assert loc.file == __file__
        assert loc.line == line

    def test_rejects_traced(self):
        with pytest.raises(ConversionError):
            wrap_fresh(wrap_fresh(ValueError(), A), B)


class TestAppendLocation:
    def test_grows_by_one_and_keeps_original(self):
        error = ValueError("x")
        traced = wrap_fresh(error, A)
        grown = append_location(traced, B)
        assert grown.locations == [A, B]
        assert grown.original is error

    def test_leaves_input_unchanged(self):
        traced = wrap_fresh(ValueError("x"), A)
        rendered = str(traced)
        first = append_location(traced, B)
        second = append_location(traced, C)
        assert traced.locations == [A]
        assert str(traced) == rendered
        assert first.locations == [A, B]
        assert second.locations == [A, C]
        assert first.original is second.original is traced.original

    def test_rejects_plain_exception(self):
        with pytest.raises(ConversionError):
            append_location(ValueError("x"), A)


class TestIntoTraced:
    def test_fresh_error_is_wrapped(self):
        error = OSError("disk")
        traced = into_traced(error, A)
        assert isinstance(traced, Traced)
        assert traced.original is error
        assert traced.locations == [A]

    def test_traced_error_gets_location_appended(self):
        traced = into_traced(ValueError("x"), A)
        again = into_traced(traced, B)
        assert again.original is traced.original
        assert again.locations == [A, B]
        assert traced.locations == [A]

    def test_original_identity_stable_over_many_propagations(self):
        error = ValueError("x")
        traced = into_traced(error, A)
        for i in range(50):
            traced = into_traced(traced, Location("hop.py", i, 1))
        assert traced.original is error
        assert len(traced.locations) == 51
        assert not isinstance(traced.original, Traced)

    def test_captures_caller(self):
        line = _here() + 1
        traced = into_traced(ValueError("x"))
        assert traced.locations[0].line == line

    def test_non_exception_rejected(self):
        with pytest.raises(ConversionError, match="only exceptions can be traced"):
            into_traced("not an error", A)

    def test_from_error_classmethod(self):
        line = _here() + 1
        traced = Traced.from_error(ValueError("x"))
        assert traced.locations[0].line == line
        again = Traced.from_error(traced)
        assert again.original is traced.original
        assert len(again.locations) == 2


class TestTracedContainer:
    def test_direct_construction_captures_caller(self):
        line = _here() + 1
        traced = Traced(ValueError("x"))
        assert traced.locations[0].line == line

    def test_explicit_empty_trail_kept(self):
        assert Traced(ValueError("x"), []).locations == []

    def test_explicit_trail_copied(self):
        trail = [A, B]
        traced = Traced(ValueError("x"), trail)
        trail.append(C)
        assert traced.locations == [A, B]

    def test_cannot_wrap_traced(self):
        with pytest.raises(ConversionError):
            Traced(Traced(ValueError("x"), [A]), [B])

    def test_cannot_subclass(self):
        with pytest.raises(TypeError):
            class Sub(Traced):  # noqa: F841
                pass

    def test_source_and_cause(self):
        error = ValueError("x")
        traced = wrap_fresh(error, A)
        assert traced.source is error
        assert traced.__cause__ is error

    def test_original_is_read_only(self):
        traced = wrap_fresh(ValueError("x"), A)
        with pytest.raises(AttributeError):
            traced.original = ValueError("y")

    def test_is_exception(self):
        traced = wrap_fresh(ValueError("x"), A)
        with pytest.raises(Traced) as exc_info:
            raise traced
        assert exc_info.value is traced

    def test_pickle_round_trip(self):
        traced = into_traced(into_traced(ValueError("x"), A), B)
        restored = pickle.loads(pickle.dumps(traced))
        assert restored.locations == [A, B]
        assert str(restored.original) == "x"
        assert str(restored) == str(traced)


class TestRendering:
    def test_display_reverse_append_order(self):
        traced = wrap_fresh(ValueError("bad input"), A)
        traced = into_traced(traced, B)
        traced = into_traced(traced, C)
        assert str(traced) == (
            "bad input\n"
            "top.py:30:1\n"
            "middle.py:20:9\n"
            "deep.py:10:5\n"
        )

    def test_debug_equals_display(self):
        traced = into_traced(into_traced(ValueError("x"), A), B)
        assert repr(traced) == str(traced)

    def test_to_dict(self):
        traced = into_traced(into_traced(KeyError("id"), A), B)
        assert traced.to_dict() == {
            "error_type": "KeyError",
            "message": "'id'",
            "locations": ["middle.py:20:9", "deep.py:10:5"],
        }


class TestAnyway:
    def test_plain_message(self):
        traced = anyway("config missing")
        assert isinstance(traced.original, Message)
        assert str(traced.original) == "config missing"

    def test_formats_args(self):
        traced = anyway("missing key %r in %s", "id", "users")
        assert str(traced.original) == "missing key 'id' in users"

    def test_captures_caller(self):
        line = _here() + 1
        traced = anyway("x")
        [loc] = traced.locations
        assert loc.file == __file__
        assert loc.line == line

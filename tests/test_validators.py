"""
Tests for leaf guards, message formatting and value rendering.
"""

import re
from datetime import date, datetime

import pytest

from shapeguard import (
    UNDEFINED,
    is_any,
    is_array,
    is_boolean,
    is_date,
    is_defined,
    is_error,
    is_function,
    is_integer,
    is_nil,
    is_non_empty_array,
    is_non_empty_string,
    is_non_negative_number,
    is_non_null_object,
    is_number,
    is_positive_number,
    is_regex,
    is_string,
    is_unknown,
    leaf,
    stringify,
    type_guard_error,
)
from shapeguard.core import expected_type_name, guard_name


class TestStringify:
    def test_fixed_tokens(self):
        assert stringify(UNDEFINED) == "undefined"
        assert stringify(len) == "function"
        assert stringify(lambda x: x) == "function"
        assert stringify(ValueError("boom")) == "Error"
        assert stringify(float("nan")) == "NaN"
        assert stringify(float("inf")) == "Infinity"
        assert stringify(float("-inf")) == "-Infinity"

    def test_json_rendering(self):
        assert stringify(None) == "null"
        assert stringify(True) == "true"
        assert stringify(1) == "1"
        assert stringify("x") == '"x"'
        assert stringify({"a": 1}) == '{\n  "a": 1\n}'

    def test_dates(self):
        assert stringify(date(2024, 1, 2)) == "2024-01-02"
        assert stringify(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"

    def test_never_raises_on_unknown_objects(self):
        class Opaque:
            def __repr__(self):
                return "<opaque>"

        assert "<opaque>" in stringify(Opaque())
        assert "function" in stringify({"callback": print})


class TestTypeGuardError:
    def test_includes_value(self):
        assert type_guard_error(1, "user.name", "string") == (
            'Expected user.name (1) to be "string"'
        )

    def test_drops_long_values(self):
        long_value = "x" * 500
        assert type_guard_error(long_value, "user.bio", "number") == (
            'Expected user.bio to be "number"'
        )


class TestLeafGuards:
    @pytest.mark.parametrize(
        "guard_fn, good, bad",
        [
            (is_string, "hello", 1),
            (is_non_empty_string, "hello", "   "),
            (is_number, 1.5, "1.5"),
            (is_integer, 3, 3.5),
            (is_positive_number, 1, 0),
            (is_non_negative_number, 0, -1),
            (is_boolean, False, 0),
            (is_date, date(2024, 1, 1), "2024-01-01"),
            (is_function, len, "len"),
            (is_regex, re.compile("a"), "a"),
            (is_error, ValueError(), "error"),
            (is_non_null_object, {}, []),
            (is_array, [], {}),
            (is_non_empty_array, [1], []),
            (is_defined, None, UNDEFINED),
            (is_nil, None, 0),
        ],
    )
    def test_accepts_and_rejects(self, guard_fn, good, bad):
        assert guard_fn(good) is True
        assert guard_fn(bad) is False

    def test_number_excludes_bool_and_nan(self):
        assert is_number(True) is False
        assert is_number(float("nan")) is False
        assert is_number(float("inf")) is True

    def test_any_and_unknown_accept_everything(self, make_context, sink):
        for value in (None, UNDEFINED, 0, "", [], {}):
            assert is_any(value, make_context())
            assert is_unknown(value, make_context())
        assert sink.messages == []

    def test_reports_through_context(self, make_context, sink):
        assert is_string(1, make_context("user.name")) is False
        assert sink.messages == ['Expected user.name (1) to be "string"']

    def test_silent_on_success(self, make_context, sink):
        assert is_string("ok", make_context())
        assert sink.messages == []

    def test_no_context_never_raises(self):
        assert is_non_null_object(None) is False
        assert is_non_null_object(None, None) is False


class TestCustomLeaf:
    def test_leaf_builder(self, make_context, sink):
        is_even = leaf("is_even", "even number", lambda x: x % 2 == 0)
        assert is_even(2)
        assert not is_even(3, make_context("n"))
        assert sink.messages == ['Expected n (3) to be "even number"']

    def test_names(self):
        assert guard_name(is_string) == "is_string"
        assert expected_type_name(is_string) == "string"
        assert expected_type_name(is_non_null_object) == "non-null object"

    def test_expected_type_from_plain_function_name(self):
        def is_postal_code(value, context=None):
            return isinstance(value, str)

        assert expected_type_name(is_postal_code) == "postal code"
        assert expected_type_name(lambda v, c=None: True) == "unknown"

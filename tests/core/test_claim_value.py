"""Tests for the tagged claim value."""

import pytest
from datetime import datetime, timezone

from neo_jwt.core.value_objects import ClaimKind, ClaimValue


class _Opaque:
    def __str__(self):
        return "opaque"


class TestClaimKind:
    """Test cases for tagging plain values."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            (None, ClaimKind.NULL),
            (True, ClaimKind.BOOLEAN),
            (42, ClaimKind.NUMBER),
            (1.5, ClaimKind.NUMBER),
            ("text", ClaimKind.STRING),
            ({"a": 1}, ClaimKind.OBJECT),
            ([1, 2], ClaimKind.ARRAY),
            ((1, 2), ClaimKind.ARRAY),
        ],
    )
    def test_of_tags_json_shape(self, value, kind):
        """Test each JSON shape gets its own kind."""
        assert ClaimValue.of(value).kind == kind

    def test_bool_is_not_a_number(self):
        """Test booleans are tagged before the int check."""
        assert ClaimValue.of(False).kind == ClaimKind.BOOLEAN

    def test_unknown_shape_falls_back_to_raw_json(self):
        """Test values without a JSON shape keep their JSON text."""
        claim = ClaimValue.of(_Opaque())
        assert claim.kind == ClaimKind.RAW_JSON
        assert claim.as_text() == '"opaque"'


class TestClaimValueText:
    """Test cases for text rendering."""

    def test_scalars(self):
        """Test scalar text forms."""
        assert ClaimValue.of(None).as_text() == ""
        assert ClaimValue.of(True).as_text() == "true"
        assert ClaimValue.of(False).as_text() == "false"
        assert ClaimValue.of(7).as_text() == "7"
        assert ClaimValue.of(7.0).as_text() == "7"
        assert ClaimValue.of(7.25).as_text() == "7.25"
        assert ClaimValue.of("héllo").as_text() == "héllo"

    def test_complex_values_render_as_compact_json(self):
        """Test objects and arrays render as compact JSON."""
        assert ClaimValue.of({"roles": ["a", "b"]}).as_text() == '{"roles":["a","b"]}'
        assert ClaimValue.of([1, "x"]).as_text() == '[1,"x"]'
        assert ClaimValue.of([]).is_complex


class TestClaimValueConversion:
    """Test cases for typed conversion."""

    def test_int_conversions(self):
        """Test int accepts integral numbers and numeric strings."""
        assert ClaimValue.of(10).try_convert(int) == (True, 10)
        assert ClaimValue.of(10.0).try_convert(int) == (True, 10)
        assert ClaimValue.of(" 12 ").try_convert(int) == (True, 12)
        assert ClaimValue.of(10.5).try_convert(int) == (False, None)
        assert ClaimValue.of("ten").try_convert(int) == (False, None)
        assert ClaimValue.of(True).try_convert(int) == (False, None)

    def test_bool_conversions(self):
        """Test bool accepts booleans and their string forms."""
        assert ClaimValue.of(True).try_convert(bool) == (True, True)
        assert ClaimValue.of("FALSE").try_convert(bool) == (True, False)
        assert ClaimValue.of(1).try_convert(bool) == (False, None)

    def test_float_conversion(self):
        """Test float widens ints and parses numeric strings."""
        assert ClaimValue.of(3).try_convert(float) == (True, 3.0)
        assert ClaimValue.of("2.5").try_convert(float) == (True, 2.5)

    def test_str_conversion_uses_text_form(self):
        """Test every kind converts to its text form."""
        assert ClaimValue.of(5).try_convert(str) == (True, "5")
        assert ClaimValue.of({"a": 1}).try_convert(str) == (True, '{"a":1}')

    def test_complex_conversions(self):
        """Test dict/list from native shapes and from JSON text."""
        assert ClaimValue.of({"a": 1}).try_convert(dict) == (True, {"a": 1})
        assert ClaimValue.of('{"a": 1}').try_convert(dict) == (True, {"a": 1})
        assert ClaimValue.of("[1, 2]").try_convert(list) == (True, [1, 2])
        assert ClaimValue.of("[1, 2]").try_convert(dict) == (False, None)
        assert ClaimValue.of("not json").try_convert(list) == (False, None)

    def test_datetime_conversion(self):
        """Test datetime reads Unix seconds as UTC."""
        converted, value = ClaimValue.of(1767225600).try_convert(datetime)
        assert converted
        assert value == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_no_type_returns_plain_value(self):
        """Test a missing type returns the plain Python value."""
        assert ClaimValue.of([1]).try_convert(None) == (True, [1])

    def test_unregistered_type_uses_isinstance(self):
        """Test other types only pass when the value already is one."""
        assert ClaimValue.of((1, 2)).try_convert(tuple) == (False, None)
        assert ClaimValue.of([1, 2]).try_convert(list) == (True, [1, 2])

"""Unit tests for {type:name} placeholder substitution."""
from __future__ import annotations

import pytest

from quarrydb.errors import TypeMismatchError, UndefinedVariableError, UnknownDataTypeError
from quarrydb.variables import (
    DataType,
    VariableSubstituter,
    escape_quotes,
    format_double,
    html_escape,
    replace_variables,
)


def test_template_without_placeholders_is_unchanged():
    sql = "SELECT * FROM users WHERE user_id = 1"
    assert replace_variables(sql, {"user_id": 5}) == sql


def test_empty_variables_short_circuit():
    assert replace_variables("user_id = {int:user_id}", {}) == "user_id = {int:user_id}"
    assert replace_variables("user_id = {int:user_id}", None) == "user_id = {int:user_id}"


def test_null_is_null_for_every_type():
    for tag in DataType:
        assert replace_variables(f"{{{tag.value}:x}}", {"x": None}) == "NULL"


def test_array_int_scenario():
    assert replace_variables("{array_int:ids}", {"ids": [1, 2, 3]}) == "1, 2, 3"


def test_string_is_html_escaped_then_quoted():
    assert replace_variables("{string:name}", {"name": "it's me"}) == "'it&#039;s me'"


def test_string_without_html_escaping_doubles_quotes():
    result = replace_variables("{string:name}", {"name": "it's <b>"}, escape_html=False)
    assert result == "'it''s <b>'"


def test_string_uses_custom_sanitizer():
    backslash = lambda text: text.replace("'", "\\'")  # noqa: E731
    result = replace_variables("{string:s}", {"s": "o'neil"}, sanitize=backslash, escape_html=False)
    assert result == "'o\\'neil'"


def test_html_escape_entities():
    assert html_escape("a & b \"c\" 'd' <e>") == "a &amp; b &quot;c&quot; &#039;d&#039; &lt;e&gt;"


def test_escape_quotes():
    assert escape_quotes("a'b''c") == "a''b''''c"


def test_undefined_variable():
    with pytest.raises(UndefinedVariableError) as exc_info:
        replace_variables("user_id = {int:user_id}", {"other": 1})
    assert exc_info.value.variable == "user_id"
    assert str(exc_info.value) == "The variable user_id was not defined."
    assert exc_info.value.code == "UNDEFINED_VARIABLE"


def test_unknown_data_type():
    with pytest.raises(UnknownDataTypeError) as exc_info:
        replace_variables("{float:x}", {"x": 1.5})
    assert exc_info.value.data_type == "float"
    assert "float" in str(exc_info.value)


def test_undefined_variable_is_checked_before_type():
    with pytest.raises(UndefinedVariableError):
        replace_variables("{float:missing}", {"x": 1})


def test_unknown_type_is_reported_even_for_null():
    with pytest.raises(UnknownDataTypeError):
        replace_variables("{float:x}", {"x": None})


def test_int_accepts_round_trip_values():
    assert replace_variables("{int:x}", {"x": 5}) == "5"
    assert replace_variables("{int:x}", {"x": "5"}) == "5"
    assert replace_variables("{int:x}", {"x": -12}) == "-12"


def test_int_accepts_integral_floats():
    assert replace_variables("{int:x}", {"x": 5.0}) == "5"
    assert replace_variables("{double:x}", {"x": 5.0}) == "5"


@pytest.mark.parametrize("value", ["5.0", 5.5, "abc", "007", True, [1], float("inf")])
def test_int_rejects_lossy_values(value):
    with pytest.raises(TypeMismatchError) as exc_info:
        replace_variables("{int:x}", {"x": value})
    assert exc_info.value.variable == "x"
    assert exc_info.value.details["expected"] == "integer"


def test_double_accepts_round_trip_values():
    assert replace_variables("{double:x}", {"x": 1.5}) == "1.5"
    assert replace_variables("{double:x}", {"x": "2.25"}) == "2.25"
    assert replace_variables("{double:x}", {"x": 3}) == "3"
    assert replace_variables("{double:x}", {"x": 3.0}) == "3"


@pytest.mark.parametrize("value", ["abc", "1.50", float("nan"), float("inf"), False])
def test_double_rejects_lossy_values(value):
    with pytest.raises(TypeMismatchError):
        replace_variables("{double:x}", {"x": value})


def test_format_double_strips_trailing_zero():
    assert format_double(10.0) == "10"
    assert format_double(0.125) == "0.125"


def test_raw_is_inserted_unmodified():
    assert replace_variables("created = {raw:now}", {"now": "NOW()"}) == "created = NOW()"


def test_array_string_escapes_every_element():
    result = replace_variables("{array_string:names}", {"names": ["a", "b'c"]})
    assert result == "'a', 'b&#039;c'"


def test_array_double_and_null_elements():
    assert replace_variables("{array_double:v}", {"v": (1.5, None, 2)}) == "1.5, NULL, 2"


@pytest.mark.parametrize("value", [5, "123", {"a": 1}])
def test_array_rejects_non_sequences(value):
    with pytest.raises(TypeMismatchError):
        replace_variables("{array_int:ids}", {"ids": value})


def test_array_element_mismatch():
    with pytest.raises(TypeMismatchError):
        replace_variables("{array_int:ids}", {"ids": [1, "two"]})


def test_repeated_placeholder_is_replaced_everywhere():
    assert replace_variables("{int:x} + {int:x}", {"x": 1}) == "1 + 1"


def test_substituted_text_is_not_rescanned():
    result = replace_variables("{raw:a} / {int:b}", {"a": "{int:b}", "b": 2})
    assert result == "{int:b} / 2"


def test_malformed_placeholders_are_left_alone():
    sql = "{int:} {:x} { int:x } {int-x}"
    assert replace_variables(sql, {"x": 1}) == sql


def test_substituter_is_reusable():
    substituter = VariableSubstituter()
    assert substituter.substitute("{int:a}", {"a": 1}) == "1"
    assert substituter.substitute("{string:a}", {"a": "x"}) == "'x'"
    assert substituter.replacement("raw", "a", {"a": "b"}) == "b"


def test_string_must_be_utf8_encodable():
    with pytest.raises(TypeMismatchError) as exc_info:
        replace_variables("{string:v}", {"v": "bad\udcff"})
    assert exc_info.value.details["expected"] == "UTF-8 string"


def test_array_string_must_be_utf8_encodable():
    with pytest.raises(TypeMismatchError):
        replace_variables("{array_string:v}", {"v": ["ok", "bad\ud800"]})

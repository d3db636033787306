from __future__ import annotations

import pytest

from memocache.errors import MemocacheValidationError
from memocache.validation import (
    ProcessResult,
    is_number,
    process_array,
    process_string,
    safe_process_array,
    safe_process_string,
    validate_array,
    validate_string,
)


def test_process_string_uppercases() -> None:
    assert process_string("hello world") == "HELLO WORLD"
    assert process_string("") == ""


def test_process_array_doubles() -> None:
    assert process_array([1, 2.5, -3]) == [2, 5.0, -6]
    assert process_array((1, 2)) == [2, 4]


@pytest.mark.parametrize("bad", [42, None, b"x", ["a"]])
def test_validate_string_rejects_non_strings(bad: object) -> None:
    with pytest.raises(MemocacheValidationError, match="string"):
        validate_string(bad)


@pytest.mark.parametrize("bad", ["abc", b"abc", 5, {"a": 1}, None])
def test_validate_array_rejects_non_arrays(bad: object) -> None:
    with pytest.raises(MemocacheValidationError, match="array"):
        validate_array(bad)


def test_validate_array_reports_bad_element_index() -> None:
    with pytest.raises(MemocacheValidationError, match=r"data\[1\]"):
        validate_array([1, True, 3])


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_string(1, name="title")


def test_is_number() -> None:
    assert is_number(1)
    assert is_number(1.5)
    assert not is_number(True)
    assert not is_number("1")


def test_safe_process_string_success_and_failure() -> None:
    ok = safe_process_string("abc")
    assert ok == ProcessResult(ok=True, value="ABC")

    bad = safe_process_string(42)
    assert bad.ok is False
    assert bad.value is None
    assert "string" in (bad.error or "")


def test_safe_process_array_success_and_failure() -> None:
    assert safe_process_array([1, 2]).value == [2, 4]

    bad = safe_process_array("nope")
    assert bad.ok is False
    assert "array" in (bad.error or "")


def test_safe_wrappers_do_not_catch_unrelated_errors() -> None:
    class Exploding(list):
        def __iter__(self):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        safe_process_array(Exploding([1]))


def test_result_as_dict() -> None:
    assert ProcessResult.success([]).as_dict() == {"ok": True, "value": []}
    assert ProcessResult.failure("bad").as_dict() == {"ok": False, "error": "bad"}

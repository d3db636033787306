"""Input validation and result-object wrappers for string/array processing."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any

from memocache.errors import MemocacheValidationError

logger = logging.getLogger("memocache.validation")


@dataclass(frozen=True, slots=True)
class ProcessResult:
    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any) -> ProcessResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, message: str) -> ProcessResult:
        return cls(ok=False, error=message)

    def as_dict(self) -> dict[str, object]:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": self.error}


def is_number(value: object) -> bool:
    # bool is an int subclass but never a valid element here.
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_string(value: object, *, name: str = "input") -> str:
    if not isinstance(value, str):
        raise MemocacheValidationError(
            f"Expected {name} to be a string, got {type(value).__name__}."
        )
    return value


def validate_array(value: object, *, name: str = "data") -> list[Any]:
    """Return ``value`` as a list if it is a non-string sequence of numbers."""

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise MemocacheValidationError(
            f"Expected {name} to be an array, got {type(value).__name__}."
        )
    for i, item in enumerate(value):
        if not is_number(item):
            raise MemocacheValidationError(
                f"Expected {name}[{i}] to be a number, got {type(item).__name__}."
            )
    return list(value)


def process_string(value: object) -> str:
    return validate_string(value).upper()


def process_array(value: object) -> list[Any]:
    return [item * 2 for item in validate_array(value)]


def safe_process_string(value: object) -> ProcessResult:
    try:
        return ProcessResult.success(process_string(value))
    except MemocacheValidationError as e:
        logger.debug("string processing rejected input: %s", e)
        return ProcessResult.failure(str(e))


def safe_process_array(value: object) -> ProcessResult:
    try:
        return ProcessResult.success(process_array(value))
    except MemocacheValidationError as e:
        logger.debug("array processing rejected input: %s", e)
        return ProcessResult.failure(str(e))

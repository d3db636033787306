"""Error formatting and actionable hints for memocache CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from memocache.errors import MemocacheConfigError, MemocacheValidationError


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, MemocacheConfigError):
        if "Invalid TOML" in msg:
            return "fix the syntax error in memocache.toml or remove the file to use defaults"
        if "version" in msg:
            return "add `version = 1` at the top of memocache.toml"
        if ">= 1" in msg:
            return "capacity and batch size must be positive integers"
        return None

    if isinstance(exc, MemocacheValidationError):
        if "array" in msg:
            return "pass a JSON array of numbers, e.g. [1, 2, 3]"
        if "number" in msg:
            return "every element must be an int or float (booleans are rejected)"
        return None

    if isinstance(exc, FileNotFoundError):
        return "check the --input path"

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()
    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result

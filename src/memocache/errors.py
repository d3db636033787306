"""Memocache exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.
"""


class MemocacheError(Exception):
    """Base exception for all memocache errors."""


class MemocacheConfigError(MemocacheError):
    """Raised for invalid user configuration."""


class MemocacheValidationError(MemocacheError, ValueError):
    """Raised when input to a processing function has the wrong shape or type."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from memocache.cache import MISSING, BoundedMemoCache, CacheStats
from memocache.errors import MemocacheConfigError, MemocacheError, MemocacheValidationError
from memocache.keys import canonical_key
from memocache.memo import Memoizer, memoize


def _package_version() -> str:
    try:
        return version("memocache")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "MISSING",
    "BoundedMemoCache",
    "CacheStats",
    "MemocacheConfigError",
    "MemocacheError",
    "MemocacheValidationError",
    "Memoizer",
    "__version__",
    "canonical_key",
    "memoize",
]

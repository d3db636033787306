"""Canonical cache keys for structured input."""

from __future__ import annotations

import json
from typing import Any

from memocache.errors import MemocacheValidationError


def canonical_key(value: Any) -> str:
    """Serialize ``value`` to a stable JSON string.

    Object keys are sorted and separators are compact, so two structurally
    equal inputs always produce the same key. Tuples encode as lists.
    """

    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise MemocacheValidationError(f"Cannot build cache key: {e}") from e

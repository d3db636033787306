"""Watch mode: re-process JSON input files whenever they change.

Every cycle goes through the same ``DataProcessor``, so saving a file with
content that was already processed is answered from the cache.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from memocache.arrays import DataProcessor
from memocache.errors import MemocacheError


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A batch of relevant file changes."""

    changed_paths: frozenset[Path]
    timestamp: float


@dataclass(frozen=True, slots=True)
class WatchCycleResult:
    """Result of a single watch processing cycle."""

    exit_code: int
    duration_s: float
    changed_paths: frozenset[Path]
    cache_hits: int = 0
    cache_misses: int = 0


def check_watchfiles_available() -> None:
    """Raise ImportError with a helpful message if watchfiles is not installed."""
    import importlib

    try:
        importlib.import_module("watchfiles")
    except ImportError:
        raise ImportError(
            "watchfiles is required for watch mode. Install it with: pip install memocache[watch]"
        ) from None


def filter_watched_files(
    changed_paths: frozenset[Path],
    *,
    watched: frozenset[Path],
) -> frozenset[Path]:
    """Keep only changed paths that are one of the watched input files."""
    return frozenset(p for p in changed_paths if p in watched)


async def run_watch_loop(
    *,
    changes_iter: AsyncIterator[set[tuple[Any, str]]],
    run_cycle: Callable[[WatchEvent], WatchCycleResult],
    on_event: Callable[[str], None],
    on_cycle_result: Callable[[WatchCycleResult], None],
    on_error: Callable[[BaseException], None],
    watched: frozenset[Path],
) -> None:
    """Main watch loop. Consumes changes_iter, filters, and calls run_cycle."""
    async for raw_changes in changes_iter:
        paths = frozenset(Path(p).resolve() for _, p in raw_changes)
        relevant = filter_watched_files(paths, watched=watched)
        if not relevant:
            continue

        event = WatchEvent(changed_paths=relevant, timestamp=time.monotonic())

        names = ", ".join(str(p) for p in sorted(relevant))
        on_event(f"[watch] change detected: {names}")

        try:
            result = run_cycle(event)
        except Exception as exc:
            on_error(exc)
            continue

        on_event(
            f"[watch] done ({result.duration_s:.2f}s, "
            f"hits={result.cache_hits} misses={result.cache_misses})"
        )
        on_cycle_result(result)


def format_watch_cycle_json(result: WatchCycleResult) -> dict[str, object]:
    """Format a cycle result as a JSON-serializable dict."""
    return {
        "command": "watch",
        "ok": result.exit_code == 0,
        "exit_code": result.exit_code,
        "duration_s": round(result.duration_s, 2),
        "changed_paths": sorted(str(p) for p in result.changed_paths),
        "cache_hits": result.cache_hits,
        "cache_misses": result.cache_misses,
    }


def build_cycle_runner(
    processor: DataProcessor,
    *,
    on_output: Callable[[Path, list[Any]], None],
    on_failure: Callable[[Path, BaseException], None],
) -> Callable[[WatchEvent], WatchCycleResult]:
    """Create a cycle runner that feeds each changed file through ``processor``."""
    from memocache.cli import read_json_input

    def runner(event: WatchEvent) -> WatchCycleResult:
        t0 = time.monotonic()
        stats = processor.cache.stats
        hits0, misses0 = stats.hits, stats.misses

        exit_code = 0
        for path in sorted(event.changed_paths):
            try:
                out = processor.process(read_json_input(path))
            except (MemocacheError, OSError) as e:
                on_failure(path, e)
                exit_code = 1
                continue
            on_output(path, out)

        return WatchCycleResult(
            exit_code=exit_code,
            duration_s=time.monotonic() - t0,
            changed_paths=event.changed_paths,
            cache_hits=stats.hits - hits0,
            cache_misses=stats.misses - misses0,
        )

    return runner


def make_watchfiles_iter(
    watch_paths: list[Path],
) -> AsyncIterator[set[tuple[Any, str]]]:
    """Create an async iterator using watchfiles.awatch()."""
    import watchfiles  # type: ignore[import-untyped]

    return watchfiles.awatch(*watch_paths, debounce=200)

"""Project configuration loading for memocache.

This module is intentionally small and deterministic: it only reads
`memocache.toml` and performs light validation. A project without the file runs
on defaults.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from memocache.errors import MemocacheConfigError

CONFIG_FILENAME = "memocache.toml"

_DEFAULT_SORT_INPUT = [64, 34, 25, 12, 22, 11, 90]


@dataclass(frozen=True)
class CacheConfig:
    capacity: int = 100


@dataclass(frozen=True)
class BatchConfig:
    size: int = 1000


@dataclass(frozen=True)
class DemoConfig:
    dataset_size: int = 100_000
    stream_size: int = 1000
    search_target: int = 25
    sort_input: list[int] = field(default_factory=lambda: list(_DEFAULT_SORT_INPUT))


@dataclass(frozen=True)
class MemocacheConfig:
    version: int = 1
    cache: CacheConfig = field(default_factory=CacheConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)


def find_project_root(start: Path) -> Path | None:
    """Walk upward from `start` (file or directory) looking for `memocache.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MemocacheConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise MemocacheConfigError(f"Expected {name} to be an integer.")
    return value


def _as_int_list(value: Any, *, name: str) -> list[int]:
    if not isinstance(value, list) or any(
        not isinstance(x, int) or isinstance(x, bool) for x in value
    ):
        raise MemocacheConfigError(f"Expected {name} to be a list of integers.")
    return list(value)


def _positive(value: int, *, name: str) -> int:
    if value < 1:
        raise MemocacheConfigError(f"Invalid config: {name} must be >= 1.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> MemocacheConfig:
    """Load and validate `memocache.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory; when no
    file is found the defaults are returned. An explicit `config_path` must
    exist.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
            if root is None:
                return MemocacheConfig()
        config_path = root / CONFIG_FILENAME
        if not config_path.is_file():
            return MemocacheConfig()

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise MemocacheConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise MemocacheConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MemocacheConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise MemocacheConfigError(f"Invalid TOML in {config_path}: {e}") from e

    return config_from_dict(data)


def config_from_dict(data: dict[str, Any]) -> MemocacheConfig:
    version = data.get("version", None)
    if version is None:
        raise MemocacheConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise MemocacheConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")
    batch_tbl = _as_table(data.get("batch"), name="batch")
    demo_tbl = _as_table(data.get("demo"), name="demo")

    defaults = DemoConfig()

    if "capacity" in cache_tbl:
        capacity = _as_int(cache_tbl["capacity"], name="cache.capacity")
    else:
        capacity = CacheConfig.capacity

    if "size" in batch_tbl:
        batch_size = _as_int(batch_tbl["size"], name="batch.size")
    else:
        batch_size = BatchConfig.size

    if "dataset_size" in demo_tbl:
        dataset_size = _as_int(demo_tbl["dataset_size"], name="demo.dataset_size")
    else:
        dataset_size = defaults.dataset_size

    if "stream_size" in demo_tbl:
        stream_size = _as_int(demo_tbl["stream_size"], name="demo.stream_size")
    else:
        stream_size = defaults.stream_size

    if "search_target" in demo_tbl:
        search_target = _as_int(demo_tbl["search_target"], name="demo.search_target")
    else:
        search_target = defaults.search_target

    if "sort_input" in demo_tbl:
        sort_input = _as_int_list(demo_tbl["sort_input"], name="demo.sort_input")
    else:
        sort_input = defaults.sort_input

    # Validation
    _positive(capacity, name="cache.capacity")
    _positive(batch_size, name="batch.size")
    if dataset_size < 0 or stream_size < 0:
        raise MemocacheConfigError("Invalid config: demo sizes must be >= 0.")

    return MemocacheConfig(
        version=version_i,
        cache=CacheConfig(capacity=capacity),
        batch=BatchConfig(size=batch_size),
        demo=DemoConfig(
            dataset_size=dataset_size,
            stream_size=stream_size,
            search_target=search_target,
            sort_input=sort_input,
        ),
    )


def with_overrides(
    cfg: MemocacheConfig,
    *,
    capacity: int | None = None,
    batch_size: int | None = None,
) -> MemocacheConfig:
    """Apply CLI overrides on top of a loaded config, re-validating them."""

    cache = cfg.cache
    batch = cfg.batch
    if capacity is not None:
        cache = CacheConfig(capacity=_positive(capacity, name="--capacity"))
    if batch_size is not None:
        batch = BatchConfig(size=_positive(batch_size, name="--batch-size"))
    return MemocacheConfig(version=cfg.version, cache=cache, batch=batch, demo=cfg.demo)

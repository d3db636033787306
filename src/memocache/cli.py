from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from memocache import __version__
from memocache.diagnostics import format_error_with_hint
from memocache.errors import MemocacheConfigError, MemocacheError, MemocacheValidationError
from memocache.progress import ProgressBar

if TYPE_CHECKING:  # pragma: no cover
    from memocache.arrays import DataProcessor
    from memocache.config import MemocacheConfig

logger = logging.getLogger("memocache.cli")

EXIT_OK = 0
EXIT_PROCESSING_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for memocache.toml).",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to memocache.toml (defaults to <root>/memocache.toml).",
    )
    p.add_argument("--capacity", type=int, default=None, help="Cache capacity override.")
    p.add_argument("--batch-size", type=int, default=None, help="Batch size override.")
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print machine-readable JSON instead of text.",
    )
    p.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memocache")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_p = subparsers.add_parser("demo", help="Run the cache/array demonstration.")
    _add_common_flags(demo_p)

    double_p = subparsers.add_parser("double", help="Double an array of numbers (memoized).")
    _add_common_flags(double_p)
    double_p.add_argument("values", nargs="*", type=_number, help="Numbers to double.")
    double_p.add_argument(
        "--input",
        action="append",
        default=[],
        help="JSON file holding an array of numbers (repeatable).",
    )

    sort_p = subparsers.add_parser("sort", help="Sort numbers ascending.")
    _add_common_flags(sort_p)
    sort_p.add_argument("values", nargs="*", type=_number)

    search_p = subparsers.add_parser("search", help="Binary-search a number in a list.")
    _add_common_flags(search_p)
    search_p.add_argument("target", type=_number)
    search_p.add_argument("values", nargs="*", type=_number)
    search_p.add_argument(
        "--presorted",
        action="store_true",
        help="Trust that VALUES are already ascending (index refers to input order).",
    )

    upper_p = subparsers.add_parser("upper", help="Uppercase a string.")
    _add_common_flags(upper_p)
    upper_p.add_argument("text")

    watch_p = subparsers.add_parser("watch", help="Re-process JSON input files on change.")
    _add_common_flags(watch_p)
    watch_p.add_argument("files", nargs="+", help="JSON files holding arrays of numbers.")

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _is_json_mode(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "json_output", False))


def _configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "verbose", False):
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_error(e: BaseException) -> None:
    _eprint(format_error_with_hint(e))


def _emit_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, sort_keys=True))


def _load_config(args: argparse.Namespace) -> MemocacheConfig:
    from memocache.config import load_config, with_overrides

    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None
    cfg = load_config(root=root, config_path=config_path)
    return with_overrides(cfg, capacity=args.capacity, batch_size=args.batch_size)


def _make_processor(cfg: MemocacheConfig) -> DataProcessor:
    from memocache.arrays import DataProcessor
    from memocache.cache import BoundedMemoCache

    return DataProcessor(BoundedMemoCache(cfg.cache.capacity), batch_size=cfg.batch.size)


def _progress_for(args: argparse.Namespace, label: str, total: int) -> ProgressBar | None:
    if args.no_progress or _is_json_mode(args) or not sys.stderr.isatty():
        return None
    return ProgressBar(label=label, total=total, enabled=True, stream=sys.stderr)


def read_json_input(path: Path) -> Any:
    """Read and decode a JSON input file."""

    text = Path(path).read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MemocacheValidationError(f"Invalid JSON in {path}: {e}") from e


def cmd_demo(args: argparse.Namespace) -> int:
    from memocache.arrays import binary_search, fast_sort, iter_doubled
    from memocache.validation import safe_process_array, safe_process_string

    json_mode = _is_json_mode(args)
    try:
        cfg = _load_config(args)
        if not json_mode:
            print("Starting memocache demo...")

        t0 = time.perf_counter()
        processor = _make_processor(cfg)

        large = list(range(cfg.demo.dataset_size))
        progress = _progress_for(args, "process", len(large))
        processor.on_batch = progress
        processed = processor.process(large)
        if progress is not None:
            progress.finish()
        processor.on_batch = None
        # Second pass is answered from the cache.
        processor.process(large)

        sorted_values = fast_sort(cfg.demo.sort_input)
        target = cfg.demo.search_target
        index = binary_search(sorted_values, target)

        streamed = 0
        for _ in iter_doubled(range(cfg.demo.stream_size)):
            streamed += 1

        results = {
            "string_ok": safe_process_string("hello world"),
            "string_bad": safe_process_string(42),
            "array_ok": safe_process_array([1, 2, 3]),
            "array_bad": safe_process_array("not an array"),
        }
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
    except MemocacheConfigError as e:
        _print_error(e)
        return EXIT_CONFIG_ERROR
    except MemocacheError as e:
        _print_error(e)
        return EXIT_PROCESSING_ERROR

    if json_mode:
        _emit_json(
            {
                "command": "demo",
                "ok": True,
                "processed": len(processed),
                "sorted": sorted_values,
                "search": {"target": target, "index": index},
                "streamed": streamed,
                "validation": {k: r.as_dict() for k, r in results.items()},
                "cache": processor.cache.stats.as_dict(),
                "elapsed_ms": round(elapsed_ms, 2),
            }
        )
        return EXIT_OK

    print(f"Processed {len(processed)} items")
    print(f"Sorted array: {sorted_values}")
    print(f"Found {target} at index: {index}")
    print(f"Memory-efficient processing: {streamed} items")
    for name, r in results.items():
        if r.ok:
            print(f"{name}: {r.value!r}")
        else:
            print(f"{name}: failed ({r.error})")
    stats = processor.cache.stats
    print(f"Cache: hits={stats.hits} misses={stats.misses} evictions={stats.evictions}")
    print(f"Execution time: {elapsed_ms:.2f}ms")
    print("Application completed successfully!")
    return EXIT_OK


def cmd_double(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        processor = _make_processor(cfg)

        inputs: list[tuple[str, Any]] = []
        if args.values or not args.input:
            inputs.append(("<args>", list(args.values)))
        for name in args.input:
            inputs.append((name, read_json_input(Path(name))))

        outputs: list[tuple[str, list[Any]]] = []
        for name, data in inputs:
            outputs.append((name, processor.process(data)))
    except MemocacheConfigError as e:
        _print_error(e)
        return EXIT_CONFIG_ERROR
    except (MemocacheError, OSError) as e:
        _print_error(e)
        return EXIT_PROCESSING_ERROR

    if _is_json_mode(args):
        _emit_json(
            {
                "command": "double",
                "ok": True,
                "results": [{"source": n, "value": v} for n, v in outputs],
                "cache": processor.cache.stats.as_dict(),
            }
        )
        return EXIT_OK

    for _, value in outputs:
        print(json.dumps(value))
    return EXIT_OK


def cmd_sort(args: argparse.Namespace) -> int:
    from memocache.arrays import fast_sort

    result = fast_sort(args.values)
    if _is_json_mode(args):
        _emit_json({"command": "sort", "ok": True, "value": result})
    else:
        print(json.dumps(result))
    return EXIT_OK


def cmd_search(args: argparse.Namespace) -> int:
    from memocache.arrays import binary_search, fast_sort

    values = list(args.values) if args.presorted else fast_sort(args.values)
    index = binary_search(values, args.target)
    if _is_json_mode(args):
        _emit_json({"command": "search", "ok": True, "values": values, "index": index})
    else:
        print(index)
    return EXIT_OK


def cmd_upper(args: argparse.Namespace) -> int:
    from memocache.validation import safe_process_string

    result = safe_process_string(args.text)
    if _is_json_mode(args):
        _emit_json({"command": "upper", **result.as_dict()})
    elif result.ok:
        print(result.value)
    else:
        _eprint(f"error: {result.error}")
    return EXIT_OK if result.ok else EXIT_PROCESSING_ERROR


def cmd_watch(args: argparse.Namespace) -> int:
    from memocache.watcher import (
        WatchCycleResult,
        WatchEvent,
        build_cycle_runner,
        check_watchfiles_available,
        format_watch_cycle_json,
        make_watchfiles_iter,
        run_watch_loop,
    )

    try:
        check_watchfiles_available()
    except ImportError as e:
        _print_error(e)
        return EXIT_CONFIG_ERROR

    try:
        cfg = _load_config(args)
    except MemocacheConfigError as e:
        _print_error(e)
        return EXIT_CONFIG_ERROR

    processor = _make_processor(cfg)
    json_mode = _is_json_mode(args)
    watched = frozenset(Path(f).resolve() for f in args.files)

    def on_output(path: Path, value: list[Any]) -> None:
        if json_mode:
            _emit_json({"command": "watch", "source": str(path), "value": value})
        else:
            print(f"{path}: {json.dumps(value)}")

    def on_failure(path: Path, exc: BaseException) -> None:
        _eprint(f"{path}: {format_error_with_hint(exc)}")

    def on_event(msg: str) -> None:
        if not json_mode:
            _eprint(msg)

    def on_cycle_result(result: WatchCycleResult) -> None:
        if json_mode:
            _emit_json(format_watch_cycle_json(result))

    def on_error(exc: BaseException) -> None:
        _print_error(exc)

    runner = build_cycle_runner(processor, on_output=on_output, on_failure=on_failure)

    # Process once up front so the first save of unchanged content is a hit.
    initial = runner(WatchEvent(changed_paths=watched, timestamp=time.monotonic()))
    on_cycle_result(initial)

    watch_dirs = sorted({p.parent for p in watched})
    on_event(f"[watch] watching {len(watched)} file(s); press Ctrl+C to stop")
    try:
        asyncio.run(
            run_watch_loop(
                changes_iter=make_watchfiles_iter(watch_dirs),
                run_cycle=runner,
                on_event=on_event,
                on_cycle_result=on_cycle_result,
                on_error=on_error,
                watched=watched,
            )
        )
    except KeyboardInterrupt:
        pass
    return EXIT_OK


_COMMANDS = {
    "demo": cmd_demo,
    "double": cmd_double,
    "sort": cmd_sort,
    "search": cmd_search,
    "upper": cmd_upper,
    "watch": cmd_watch,
}


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_ERROR

    _configure_logging(args)
    handler = _COMMANDS.get(args.command)
    if handler is None:
        return EXIT_CONFIG_ERROR
    logger.debug("running command %s", args.command)
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

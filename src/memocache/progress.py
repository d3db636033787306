from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from shutil import get_terminal_size


@dataclass(slots=True)
class ProgressBar:
    """Single-line stderr progress for batched processing.

    ``update`` takes absolute element counts, so it can be handed directly to
    ``double_in_batches(on_batch=...)``.
    """

    label: str
    total: int
    enabled: bool = True
    stream: object = sys.stderr
    width: int = 28
    min_interval_s: float = 0.08
    _done: int = field(init=False, default=0, repr=False)
    _batches: int = field(init=False, default=0, repr=False)
    _last_render: float = field(init=False, default=0.0, repr=False)
    _finished: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self._render()  # initial line

    def __call__(self, done: int, total: int) -> None:
        self.total = total
        self.update(done)

    def update(self, done: int) -> None:
        if self._finished:
            return
        self._done = done
        self._batches += 1
        self._render()

    def finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._render(force=True)
        self._write("\n")

    def _write(self, s: str) -> None:
        if not self.enabled:
            return
        try:
            self.stream.write(s)  # type: ignore[attr-defined]
            self.stream.flush()  # type: ignore[attr-defined]
        except Exception:
            # Progress is best-effort; never fail the CLI because of rendering.
            self.enabled = False

    def _render(self, *, force: bool = False) -> None:
        if not self.enabled:
            return

        now = time.time()
        if (not force) and (now - self._last_render) < float(self.min_interval_s):
            return
        self._last_render = now

        total = max(0, int(self.total))
        done = min(max(0, int(self._done)), total) if total else int(self._done)
        frac = (done / total) if total else 1.0

        fill = int(round(self.width * frac))
        fill = min(max(0, fill), self.width)
        bar = "#" * fill + "-" * (self.width - fill)

        cols = get_terminal_size(fallback=(80, 20)).columns
        msg = f"{self.label} [{bar}] {done}/{total} batches={self._batches}"
        self._write("\r" + msg[: max(0, cols - 1)])

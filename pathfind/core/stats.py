# pathfind/core/stats.py
#!/usr/bin/env python3
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional


def display_time(seconds: float) -> str:
    """Readable runtime, e.g. '1m 2s 35ms' or '0s 7ms'."""
    total_ms = int(round(seconds * 1000))
    m, rest = divmod(total_ms, 60_000)
    s, ms = divmod(rest, 1000)
    if m > 0:
        return f"{m}m {s}s {ms}ms"
    return f"{s}s {ms}ms"


@dataclass
class RunStats:
    """
    Per-run bookkeeping. The clock only runs around algorithmic work; sink
    calls are bracketed by ``paused()`` so display pacing is not counted.
    """
    name: str
    iterations: int = 0
    success: bool = False
    path_length: int = 0
    run_time: float = 0.0          # seconds
    recorded: bool = False
    _started_at: Optional[float] = field(default=None, repr=False)

    @property
    def clock_running(self) -> bool:
        return self._started_at is not None

    def start_clock(self) -> None:
        if self._started_at is None:
            self._started_at = time.perf_counter()

    def stop_clock(self) -> None:
        if self._started_at is not None:
            self.run_time += time.perf_counter() - self._started_at
            self._started_at = None

    @contextmanager
    def paused(self):
        was_running = self.clock_running
        self.stop_clock()
        try:
            yield
        finally:
            if was_running:
                self.start_clock()

    def record(self, success: bool, iterations: int, path_length: int) -> None:
        if self.recorded:
            raise RuntimeError(f"Result for {self.name!r} already recorded")
        self.success = success
        self.iterations = iterations
        self.path_length = path_length
        self.recorded = True

    def as_dict(self) -> dict:
        return {
            "algo": self.name,
            "iterations": self.iterations,
            "success": self.success,
            "path_len": self.path_length,
            "run_time": self.run_time,
        }

    def pretty(self) -> str:
        return "\n".join([
            f"Statistics for\t{self.name}",
            f"Found path:\t{self.success}",
            f"Path length:\t{self.path_length}",
            f"Iterations:\t{self.iterations}",
            f"Runtime:\t{display_time(self.run_time)}",
        ])

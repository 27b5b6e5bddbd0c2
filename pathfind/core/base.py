# pathfind/core/base.py
#!/usr/bin/env python3
"""
Lifecycle shared by the grid searches.

Algorithm API (same for A* and Dijkstra):
- init(grid, sink) - reset() - step() -> StepResult - cancel() - release()

``reset()`` validates the grid, moves it to RUNNING and seeds the search.
Each ``step()`` is one loop iteration. Whatever way the search ends
(path found, search space exhausted, cancel(), an exception inside step())
the grid goes back to EDITABLE.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pathfind.core.grid import Grid
from pathfind.core.sink import DisplaySink, GridSink
from pathfind.core.stats import RunStats
from pathfind.core.types import Cell, CellState, StepResult


@dataclass
class SearchAlgo:
    name: str = "search"

    grid: Optional[Grid] = None
    sink: Optional[DisplaySink] = None
    stats: Optional[RunStats] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    matrix: List[List[CellState]] = field(default_factory=list)  # snapshot taken at reset
    current: Optional[Cell] = None
    iterations: int = 0
    path: List[Cell] = field(default_factory=list)
    status: str = "idle"
    _owns_grid: bool = field(default=False, repr=False)

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, sink: Optional[DisplaySink] = None) -> None:
        self.release()
        self.grid = grid
        self.sink = sink if sink is not None else GridSink(grid)
        self.reset()

    def reset(self) -> None:
        """Start a fresh run on the current grid."""
        if self.grid is None:
            return
        self.release()
        self.status = "idle"
        self.current = None
        self.iterations = 0
        self.path = []
        self.stats = RunStats(self.name)

        with self.grid.lock:
            self.start, self.goal = self.grid.endpoints()
            self.grid.begin_run()
        self._owns_grid = True
        self.status = "running"

        try:
            self.stats.start_clock()
            self.matrix = self.grid.as_matrix()
            self._seed()
            with self.stats.paused():
                self.sink.flush_immediate()
        except BaseException:
            self.status = "idle"
            self.release()
            raise
        finally:
            self.stats.stop_clock()

    def release(self) -> None:
        """Hand the grid back to the editor. Safe to call any number of times."""
        if self._owns_grid and self.grid is not None:
            self.grid.end_run()
        self._owns_grid = False
        if self.stats is not None:
            self.stats.stop_clock()

    def cancel(self) -> None:
        if self.status != "running":
            return
        self.stats.stop_clock()
        self.stats.record(False, self.iterations, -1)
        self.status = "cancelled"
        self.release()

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        if self.grid is None or self.status == "idle":
            return StepResult(status="idle", metrics={"algo": self.name})
        if self.status != "running":
            return StepResult(
                status=self.status,
                path=list(self.path) if self.status == "done" else None,
                metrics=self._metrics(),
            )
        self.stats.start_clock()
        try:
            return self._step()
        except BaseException:
            self.status = "idle"
            self.release()
            raise
        finally:
            self.stats.stop_clock()

    def _seed(self) -> None:
        raise NotImplementedError

    def _step(self) -> StepResult:
        raise NotImplementedError

    # -------------------- helpers --------------------

    def _deselect_previous(self) -> None:
        if self.current is None:
            return
        with self.stats.paused():
            self.sink.mark_unselected(*self.current)
            self.sink.mark_visited(*self.current)

    def _finish_success(self, path: List[Cell]) -> StepResult:
        self.stats.stop_clock()
        self.stats.record(True, self.iterations, len(path))
        self.path = path
        for c in path:
            self.sink.mark_solution(*c)
        self.sink.flush_immediate()
        self.status = "done"
        self.release()
        return StepResult(
            status="done",
            closed=[self.current],
            current=self.current,
            path=list(path),
            metrics=self._metrics(),
        )

    def _finish_failure(self) -> StepResult:
        self.stats.stop_clock()
        self.stats.record(False, self.iterations, -1)
        self.status = "no_path"
        self.release()
        return StepResult(status="no_path", current=self.current, metrics=self._metrics())

    def _open_size(self) -> int:
        return 0

    def _closed_count(self) -> int:
        return 0

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "iterations": self.iterations,
            "open_size": self._open_size(),
            "closed_count": self._closed_count(),
            "path_len": self.stats.path_length if self.stats and self.stats.recorded else 0,
            "run_time": self.stats.run_time if self.stats else 0.0,
        }

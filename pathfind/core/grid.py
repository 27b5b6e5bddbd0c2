# pathfind/core/grid.py
#!/usr/bin/env python3
"""
Shared grid model.

The grid is a fixed-size matrix of CellState values plus a small run-state
machine deciding who may touch it:

    EDITABLE --toggle_lock()--> LOCKED(pending marker) --toggle_lock()--> EDITABLE
    EDITABLE --begin_run()----> RUNNING ------------------end_run()-----> EDITABLE

LOCKED means a Start/End marker has been picked up and not yet dropped, so no
search may start. RUNNING means a search owns the grid, so edits are refused.
Search-side mark_* transitions are always allowed; they only swap a cell
between values with the same meaning.
"""

import logging
import threading
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from pathfind.core.types import Cell, CellState

logger = logging.getLogger(__name__)


class GridStateError(RuntimeError):
    """Grid is not in a state that allows the requested operation."""


class GridMode(Enum):
    EDITABLE = "editable"
    LOCKED = "locked"
    RUNNING = "running"


class Grid:
    def __init__(self, width: int, height: int, fill: CellState = CellState.EMPTY):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.cells: List[List[CellState]] = [[CellState(fill)] * width for _ in range(height)]  # [row][col]
        self.mode = GridMode.EDITABLE
        self.value_to_move: Optional[CellState] = None
        self.lock = threading.RLock()

    # -------------------- constructors --------------------

    @classmethod
    def create(cls, width: int, height: int) -> "Grid":
        """Empty grid with Start in the top-left and End in the bottom-right corner."""
        grid = cls(width, height)
        grid.cells[0][0] = CellState.START
        grid.cells[height - 1][width - 1] = CellState.END
        return grid

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        assert all(len(r) == width for r in rows), "cells size mismatch"
        grid = cls(width, height)
        for y, row in enumerate(rows):
            for x, v in enumerate(row):
                grid.cells[y][x] = CellState(v)
        return grid

    # -------------------- run-state machine --------------------

    @property
    def locked(self) -> bool:
        return self.mode is GridMode.LOCKED

    @property
    def finalized(self) -> bool:
        return self.mode is GridMode.RUNNING

    def toggle_lock(self) -> bool:
        """Flip EDITABLE <-> LOCKED. Refused while a search is running."""
        with self.lock:
            if self.mode is GridMode.RUNNING:
                logger.debug("toggle_lock refused: search running")
                return False
            if self.mode is GridMode.EDITABLE:
                self.mode = GridMode.LOCKED
            else:
                self.mode = GridMode.EDITABLE
                self.value_to_move = None
            return True

    def set_pending_move(self, marker: CellState) -> bool:
        marker = CellState(marker).base
        if marker not in (CellState.START, CellState.END):
            raise ValueError(f"Only START or END can be moved, got {marker.name}")
        with self.lock:
            if self.mode is not GridMode.LOCKED:
                logger.debug("set_pending_move refused: grid is %s", self.mode.value)
                return False
            self.value_to_move = marker
            return True

    def begin_run(self) -> None:
        with self.lock:
            if self.mode is not GridMode.EDITABLE:
                raise GridStateError(f"Cannot start a search while grid is {self.mode.value}")
            self.mode = GridMode.RUNNING

    def end_run(self) -> None:
        with self.lock:
            if self.mode is GridMode.RUNNING:
                self.mode = GridMode.EDITABLE

    # -------------------- access --------------------

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds((x, y)):
            raise IndexError(f"Cell ({x}, {y}) outside {self.width}x{self.height} grid")

    def get(self, x: int, y: int) -> CellState:
        self._check(x, y)
        return self.cells[y][x]

    def __getitem__(self, c: Cell) -> CellState:
        return self.get(*c)

    def set_cell_state(self, x: int, y: int, state: CellState) -> bool:
        """Editor-side write. Returns False (and changes nothing) while a search runs."""
        self._check(x, y)
        with self.lock:
            if self.mode is GridMode.RUNNING:
                logger.debug("edit of (%d, %d) refused: search running", x, y)
                return False
            self.cells[y][x] = CellState(state)
            return True

    def _transition(self, x: int, y: int, allowed: Iterable[CellState], to: CellState) -> bool:
        self._check(x, y)
        with self.lock:
            if self.cells[y][x] in allowed:
                self.cells[y][x] = to
                return True
            return False

    def __iter__(self) -> Iterator[Tuple[Cell, CellState]]:
        """Row by row, left to right."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y), self.cells[y][x]

    def as_matrix(self) -> List[List[CellState]]:
        """Snapshot copy, [row][col]."""
        with self.lock:
            return [list(row) for row in self.cells]

    def sum_values(self) -> int:
        return sum(int(v) for _, v in self)

    def find(self, predicate) -> List[Cell]:
        with self.lock:
            return [c for c, v in self if predicate(v)]

    def count(self, *states: CellState) -> int:
        return sum(1 for _, v in self if v in states)

    def endpoints(self) -> Tuple[Cell, Cell]:
        """The unique Start and End cells; GridStateError unless there is exactly one of each."""
        starts = self.find(lambda v: v.is_start)
        ends = self.find(lambda v: v.is_end)
        if len(starts) != 1 or len(ends) != 1:
            raise GridStateError(
                f"Grid needs exactly one start and one end, found {len(starts)} and {len(ends)}"
            )
        return starts[0], ends[0]

    def neighbors4(self, c: Cell, matrix: Optional[List[List[CellState]]] = None) -> List[Cell]:
        """Orthogonal, in-bounds, non-obstacle neighbours in the order -x, +x, -y, +y."""
        m = self.cells if matrix is None else matrix
        x, y = c
        out: List[Cell] = []
        for n in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
            if self.in_bounds(n) and not m[n[1]][n[0]].is_obstacle:
                out.append(n)
        return out

    # -------------------- search markings --------------------
    # These only swap a cell between values with equivalent meaning, so they
    # are allowed while RUNNING.

    def mark_selected(self, x: int, y: int) -> bool:
        """[0-3] -> [4-7]"""
        with self.lock:
            v = self.get(x, y)
            if v > 3:
                return False
            self.cells[y][x] = v.selected
            return True

    def mark_unselected(self, x: int, y: int) -> bool:
        """[4-7] -> [0-3]"""
        with self.lock:
            v = self.get(x, y)
            if not v.is_selected:
                return False
            self.cells[y][x] = v.base
            return True

    def mark_open(self, x: int, y: int) -> bool:
        return self._transition(x, y, (CellState.EMPTY,), CellState.OPEN)

    def mark_unopen(self, x: int, y: int) -> bool:
        return self._transition(x, y, (CellState.OPEN,), CellState.EMPTY)

    def mark_visited(self, x: int, y: int) -> bool:
        # start/end keep their own colour
        return self._transition(x, y, (CellState.EMPTY,), CellState.VISITED)

    def mark_solution(self, x: int, y: int) -> bool:
        return self._transition(
            x, y,
            (CellState.EMPTY, CellState.EMPTY_SELECTED, CellState.OPEN, CellState.VISITED),
            CellState.SOLUTION,
        )

    def remove_markings(self) -> bool:
        """Put every cell back to EMPTY/OBSTACLE/START/END. Refused while a search runs."""
        with self.lock:
            if self.mode is GridMode.RUNNING:
                logger.debug("remove_markings refused: search running")
                return False
            for row in self.cells:
                for x, v in enumerate(row):
                    row[x] = v.base
            return True

    # -------------------- debug --------------------

    _GLYPHS = {
        CellState.EMPTY: ".", CellState.OBSTACLE: "#", CellState.START: "S", CellState.END: "E",
        CellState.OPEN: "o", CellState.VISITED: "x", CellState.SOLUTION: "*",
    }

    def __str__(self) -> str:
        rows = []
        for row in self.as_matrix():
            rows.append("".join(self._GLYPHS.get(v, self._GLYPHS[v.base].lower()) for v in row))
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, mode={self.mode.value})"

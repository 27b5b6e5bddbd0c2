# pathfind/core/dijkstra.py
#!/usr/bin/env python3
"""
Dijkstra over a Fibonacci heap — one extraction per step().

Every cell of the grid gets a PriorityItem up front (0 for the start,
infinity for everything else) and relaxations go through decrease_key.
"""

from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Optional, Set

from pathfind.core.base import SearchAlgo
from pathfind.core.fibheap import FibonacciHeap, PriorityItem
from pathfind.core.types import Cell, StepResult


@dataclass
class DijkstraAlgo(SearchAlgo):
    name: str = "Dijkstra"

    heap: FibonacciHeap = field(default_factory=FibonacciHeap)
    items: Dict[Cell, PriorityItem] = field(default_factory=dict)
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    removed: Set[Cell] = field(default_factory=set)

    def _seed(self) -> None:
        self.heap = FibonacciHeap()
        self.items.clear()
        self.parent.clear()
        self.removed.clear()

        # column by column, like the cell matrix is laid out in x-major order
        for x in range(self.grid.width):
            for y in range(self.grid.height):
                c = (x, y)
                item = PriorityItem(0 if c == self.start else inf, value=c)
                self.items[c] = item
                self.heap.insert(item)

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = []
        cur: Optional[Cell] = end
        while cur != self.start:
            path.append(cur)
            cur = self.parent[cur]
        path.reverse()
        return path

    def _step(self) -> StepResult:
        if self.heap.is_empty():
            return self._finish_failure()

        self._deselect_previous()

        item = self.heap.extract_min()
        u: Cell = item.value

        # everything left in the heap is unreachable
        if item.key == inf:
            return self._finish_failure()

        self.removed.add(u)
        self.current = u

        with self.stats.paused():
            self.sink.mark_selected(*u)
            self.sink.flush()

        if u == self.goal:
            return self._finish_success(self._reconstruct_path(u))

        for v in self.grid.neighbors4(u, self.matrix):
            if v in self.removed:
                continue
            alt = item.key + 1
            target = self.items[v]
            if alt < target.key:
                self.heap.decrease_key(target, alt)
                self.parent[v] = u

        self.iterations += 1
        return StepResult(status="running", closed=[u], current=u, metrics=self._metrics())

    def _open_size(self) -> int:
        return len(self.heap)

    def _closed_count(self) -> int:
        return len(self.removed)

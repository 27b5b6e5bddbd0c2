# pathfind/core/astar.py
#!/usr/bin/env python3
"""
A* — one expansion per step().

Heuristic:
- Manhattan distance; admissible and consistent on a unit-cost 4-connected grid.

Open set:
- Plain list scanned for the lowest f on every pop. Ties go to the entry
  that was added first.
"""

from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Set

from pathfind.core.base import SearchAlgo
from pathfind.core.types import Cell, StepResult


def manhattan(a: Cell, b: Cell) -> int:
    (x, y), (gx, gy) = a, b
    return abs(gx - x) + abs(gy - y)


@dataclass
class AStarAlgo(SearchAlgo):
    name: str = "A*"

    open_list: List[Cell] = field(default_factory=list)
    open_set: Set[Cell] = field(default_factory=set)       # membership for open_list
    closed_set: Set[Cell] = field(default_factory=set)
    g: Dict[Cell, int] = field(default_factory=dict)
    f: Dict[Cell, int] = field(default_factory=dict)
    parent: Dict[Cell, Cell] = field(default_factory=dict)

    def _seed(self) -> None:
        self.open_list.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.g.clear()
        self.f.clear()
        self.parent.clear()

        s = self.start
        self.g[s] = 0
        self.f[s] = manhattan(s, self.goal)
        self.open_list.append(s)
        self.open_set.add(s)

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        """Cells from the one after start up to end, start excluded."""
        path: List[Cell] = []
        cur = end
        while cur != self.start:
            path.append(cur)
            cur = self.parent[cur]
        path.reverse()
        return path

    def _step(self) -> StepResult:
        self._deselect_previous()

        if not self.open_list:
            return self._finish_failure()

        u = min(self.open_list, key=lambda c: self.f.get(c, inf))
        self.current = u

        with self.stats.paused():
            self.sink.mark_unopen(*u)
            self.sink.mark_selected(*u)
            self.sink.flush()

        if u == self.goal:
            return self._finish_success(self._reconstruct_path(u))

        self.open_list.remove(u)
        self.open_set.discard(u)
        self.closed_set.add(u)

        opened_now: List[Cell] = []
        for v in self.grid.neighbors4(u, self.matrix):
            alt = self.g[u] + 1
            if alt < self.g.get(v, inf):
                self.parent[v] = u
                self.g[v] = alt
                self.f[v] = alt + manhattan(v, self.goal)
                if v not in self.open_set:
                    self.open_list.append(v)
                    self.open_set.add(v)
                    opened_now.append(v)
                    with self.stats.paused():
                        self.sink.mark_open(*v)

        self.iterations += 1
        return StepResult(
            status="running",
            opened=opened_now,
            closed=[u],
            current=u,
            metrics=self._metrics(),
        )

    def _open_size(self) -> int:
        return len(self.open_list)

    def _closed_count(self) -> int:
        return len(self.closed_set)

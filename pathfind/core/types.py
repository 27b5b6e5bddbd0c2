# pathfind/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (col, row)


class CellState(IntEnum):
    """
    Value stored in every grid cell.

    0-3 are the base states, 4-7 the same states highlighted ("selected"),
    8-10 are markings left behind by a search.
    """
    EMPTY = 0
    OBSTACLE = 1
    START = 2
    END = 3
    EMPTY_SELECTED = 4
    OBSTACLE_SELECTED = 5
    START_SELECTED = 6
    END_SELECTED = 7
    OPEN = 8
    VISITED = 9
    SOLUTION = 10

    @property
    def is_selected(self) -> bool:
        return 4 <= self <= 7

    @property
    def base(self) -> "CellState":
        """Strip highlight and search markings: back to one of EMPTY/OBSTACLE/START/END."""
        if self > 7:
            return CellState.EMPTY
        return CellState(self % 4)

    @property
    def selected(self) -> "CellState":
        if self > 3:
            return self
        return CellState(self + 4)

    @property
    def is_obstacle(self) -> bool:
        return self in (CellState.OBSTACLE, CellState.OBSTACLE_SELECTED)

    @property
    def is_start(self) -> bool:
        return self in (CellState.START, CellState.START_SELECTED)

    @property
    def is_end(self) -> bool:
        return self in (CellState.END, CellState.END_SELECTED)


class Algorithm(Enum):
    ASTAR = "A*"
    DIJKSTRA = "Dijkstra"

    @classmethod
    def parse(cls, label: "str | Algorithm") -> "Algorithm":
        if isinstance(label, cls):
            return label
        key = str(label).strip().lower().replace("*", "star").replace("-", "").replace("_", "")
        for algo in cls:
            if key == algo.value.lower().replace("*", "star"):
                return algo
        raise ValueError(f"Unknown algorithm: {label!r}")


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path" | "cancelled"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in ("done", "no_path", "cancelled")

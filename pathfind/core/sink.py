# pathfind/core/sink.py
#!/usr/bin/env python3
"""
Display sinks: where a running search pushes its cell transitions.

Calls are synchronous and arrive in exactly the order the search makes them.
``flush()`` is the paced redraw used once per iteration, ``flush_immediate()``
the unpaced one used for one-off changes (initial state, final path).
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, List, NamedTuple, Optional

from pathfind.core.grid import Grid


class DisplaySink(ABC):
    @abstractmethod
    def mark_selected(self, x: int, y: int) -> None: ...

    @abstractmethod
    def mark_unselected(self, x: int, y: int) -> None: ...

    @abstractmethod
    def mark_open(self, x: int, y: int) -> None: ...

    @abstractmethod
    def mark_unopen(self, x: int, y: int) -> None: ...

    @abstractmethod
    def mark_visited(self, x: int, y: int) -> None: ...

    @abstractmethod
    def mark_solution(self, x: int, y: int) -> None: ...

    @abstractmethod
    def flush(self) -> None: ...

    @abstractmethod
    def flush_immediate(self) -> None: ...


class NullSink(DisplaySink):
    """Discards everything."""

    def mark_selected(self, x, y): pass
    def mark_unselected(self, x, y): pass
    def mark_open(self, x, y): pass
    def mark_unopen(self, x, y): pass
    def mark_visited(self, x, y): pass
    def mark_solution(self, x, y): pass
    def flush(self): pass
    def flush_immediate(self): pass


class GridSink(DisplaySink):
    """
    Applies every transition to the grid itself, so whatever draws the grid
    sees the search progress. ``on_flush`` is called on every flush (e.g. to
    request a redraw); ``delay`` seconds of sleep follow each paced flush.
    """

    def __init__(self, grid: Grid, delay: float = 0.0, on_flush: Optional[Callable[[], None]] = None):
        self.grid = grid
        self.delay = delay
        self.on_flush = on_flush

    def mark_selected(self, x, y):
        self.grid.mark_selected(x, y)

    def mark_unselected(self, x, y):
        self.grid.mark_unselected(x, y)

    def mark_open(self, x, y):
        self.grid.mark_open(x, y)

    def mark_unopen(self, x, y):
        self.grid.mark_unopen(x, y)

    def mark_visited(self, x, y):
        self.grid.mark_visited(x, y)

    def mark_solution(self, x, y):
        self.grid.mark_solution(x, y)

    def flush(self):
        if self.on_flush:
            self.on_flush()
        if self.delay > 0:
            time.sleep(self.delay)

    def flush_immediate(self):
        if self.on_flush:
            self.on_flush()


class TraceEvent(NamedTuple):
    op: str                 # "selected" | "unselected" | "open" | ... | "flush" | "flush_immediate"
    x: Optional[int] = None
    y: Optional[int] = None


class RecordingSink(GridSink):
    """GridSink that also keeps the ordered list of every call it received."""

    def __init__(self, grid: Grid, delay: float = 0.0, on_flush: Optional[Callable[[], None]] = None):
        super().__init__(grid, delay, on_flush)
        self.events: List[TraceEvent] = []

    def mark_selected(self, x, y):
        self.events.append(TraceEvent("selected", x, y))
        super().mark_selected(x, y)

    def mark_unselected(self, x, y):
        self.events.append(TraceEvent("unselected", x, y))
        super().mark_unselected(x, y)

    def mark_open(self, x, y):
        self.events.append(TraceEvent("open", x, y))
        super().mark_open(x, y)

    def mark_unopen(self, x, y):
        self.events.append(TraceEvent("unopen", x, y))
        super().mark_unopen(x, y)

    def mark_visited(self, x, y):
        self.events.append(TraceEvent("visited", x, y))
        super().mark_visited(x, y)

    def mark_solution(self, x, y):
        self.events.append(TraceEvent("solution", x, y))
        super().mark_solution(x, y)

    def flush(self):
        self.events.append(TraceEvent("flush"))
        super().flush()

    def flush_immediate(self):
        self.events.append(TraceEvent("flush_immediate"))
        super().flush_immediate()

    def ops(self, *kinds: str) -> List[TraceEvent]:
        return [e for e in self.events if e.op in kinds]

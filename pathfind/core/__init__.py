"""
Search core: grid model, Fibonacci heap, A*/Dijkstra and run bookkeeping.
"""

from pathfind.core.editor import GridEditor
from pathfind.core.fibheap import FibonacciHeap, HeapEmptyError, InvalidKeyError, Node, PriorityItem
from pathfind.core.grid import Grid, GridMode, GridStateError
from pathfind.core.search import CancelToken, make_algo, run, run_in_thread
from pathfind.core.sink import DisplaySink, GridSink, NullSink, RecordingSink, TraceEvent
from pathfind.core.stats import RunStats
from pathfind.core.types import Algorithm, Cell, CellState, StepResult

__all__ = [
    "Algorithm",
    "CancelToken",
    "Cell",
    "CellState",
    "DisplaySink",
    "FibonacciHeap",
    "Grid",
    "GridEditor",
    "GridMode",
    "GridSink",
    "GridStateError",
    "HeapEmptyError",
    "InvalidKeyError",
    "Node",
    "NullSink",
    "PriorityItem",
    "RecordingSink",
    "RunStats",
    "StepResult",
    "TraceEvent",
    "make_algo",
    "run",
    "run_in_thread",
]

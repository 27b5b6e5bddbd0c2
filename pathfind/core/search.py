# pathfind/core/search.py
#!/usr/bin/env python3
"""
Entry points for running a search to completion.

    path, stats = run(grid, Algorithm.DIJKSTRA, sink)

``run`` blocks until the search ends; ``run_in_thread`` does the same on a
worker thread so a UI loop can keep drawing the grid meanwhile.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple, Union

from pathfind.core.astar import AStarAlgo
from pathfind.core.base import SearchAlgo
from pathfind.core.dijkstra import DijkstraAlgo
from pathfind.core.grid import Grid
from pathfind.core.sink import DisplaySink
from pathfind.core.stats import RunStats
from pathfind.core.types import Algorithm, Cell

logger = logging.getLogger(__name__)

SearchOutcome = Tuple[List[Cell], RunStats]


class CancelToken:
    """Checked once per search iteration."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def make_algo(kind: Union[Algorithm, str]) -> SearchAlgo:
    kind = Algorithm.parse(kind)
    if kind is Algorithm.ASTAR:
        return AStarAlgo()
    return DijkstraAlgo()


def run(
    grid: Grid,
    algorithm: Union[Algorithm, str],
    sink: Optional[DisplaySink] = None,
    cancel: Optional[CancelToken] = None,
) -> SearchOutcome:
    """
    Run one search on ``grid`` until it finds the end, exhausts the grid or is
    cancelled. Returns the path (start excluded, end included; empty when
    there is none) and the run statistics.
    """
    algo = make_algo(algorithm)
    logger.info("Running %s on %dx%d grid", algo.name, grid.width, grid.height)
    algo.init(grid, sink)
    try:
        while True:
            if cancel is not None and cancel.cancelled:
                algo.cancel()
                logger.warning("%s cancelled after %d iterations", algo.name, algo.iterations)
                break
            if algo.step().finished:
                break
    finally:
        algo.release()

    logger.info("%s", algo.stats.pretty())
    return list(algo.path), algo.stats


class SearchThread(threading.Thread):
    def __init__(
        self,
        grid: Grid,
        algorithm: Union[Algorithm, str],
        sink: Optional[DisplaySink] = None,
        cancel: Optional[CancelToken] = None,
        on_done: Optional[Callable[["SearchThread"], None]] = None,
    ):
        super().__init__(name=f"search-{Algorithm.parse(algorithm).value}", daemon=True)
        self.grid = grid
        self.algorithm = algorithm
        self.sink = sink
        self.cancel_token = cancel if cancel is not None else CancelToken()
        self.on_done = on_done
        self.result: Optional[SearchOutcome] = None
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.result = run(self.grid, self.algorithm, self.sink, self.cancel_token)
        except Exception as ex:
            self.error = ex
            logger.exception("Search on worker thread failed")
        finally:
            if self.on_done:
                self.on_done(self)

    def cancel(self) -> None:
        self.cancel_token.cancel()


def run_in_thread(
    grid: Grid,
    algorithm: Union[Algorithm, str],
    sink: Optional[DisplaySink] = None,
    cancel: Optional[CancelToken] = None,
    on_done: Optional[Callable[[SearchThread], None]] = None,
) -> SearchThread:
    t = SearchThread(grid, algorithm, sink, cancel, on_done)
    t.start()
    return t

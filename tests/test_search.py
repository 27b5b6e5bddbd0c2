"""
Tests for A* and Dijkstra: results, display trace, statistics and the
guarantee that the grid is always handed back to the editor.
"""

import random
from collections import deque

import pytest

from pathfind.core.astar import AStarAlgo, manhattan
from pathfind.core.dijkstra import DijkstraAlgo
from pathfind.core.grid import Grid, GridMode, GridStateError
from pathfind.core.search import CancelToken, make_algo, run, run_in_thread
from pathfind.core.sink import NullSink, RecordingSink
from pathfind.core.types import Algorithm, CellState

ALGOS = [Algorithm.ASTAR, Algorithm.DIJKSTRA]


def bfs_length(grid: Grid) -> int:
    """Reference shortest-path length, -1 when unreachable."""
    start, end = grid.endpoints()
    dist = {start: 0}
    q = deque([start])
    while q:
        c = q.popleft()
        if c == end:
            return dist[c]
        for n in grid.neighbors4(c):
            if n not in dist:
                dist[n] = dist[c] + 1
                q.append(n)
    return -1


def assert_valid_path(grid: Grid, path):
    start, end = grid.endpoints()
    assert path[-1] == end
    assert start not in path
    prev = start
    for c in path:
        assert manhattan(prev, c) == 1
        assert not grid.get(*c).is_obstacle
        prev = c


@pytest.mark.parametrize("algo", ALGOS)
class TestScenarios:
    """Fixed grids with known answers."""

    def test_open_grid(self, algo, open_grid):
        """5x5 open grid corner to corner: path length 8."""
        path, stats = run(open_grid, algo)
        assert stats.success
        assert stats.path_length == 8
        assert len(path) == 8
        assert_valid_path(open_grid, path)

    def test_detour_through_gap(self, algo, walled_grid):
        """The only way round the wall is through (2, 4): length 10."""
        path, stats = run(walled_grid, algo)
        assert stats.success
        assert stats.path_length == 10
        assert (2, 4) in path
        assert_valid_path(walled_grid, path)

    def test_blocked_gap(self, algo, blocked_grid):
        """With the gap closed there is no path; that is a result, not an error."""
        path, stats = run(blocked_grid, algo)
        assert path == []
        assert not stats.success
        assert stats.path_length == -1
        assert blocked_grid.mode is GridMode.EDITABLE

    def test_unreachable_cells_never_selected(self, algo, blocked_grid):
        """A failed search leaves no highlighted cell and never visits the far side."""
        sink = RecordingSink(blocked_grid)
        run(blocked_grid, algo, sink)
        assert blocked_grid.count(CellState.EMPTY_SELECTED) == 0
        assert all(e.x < 2 for e in sink.ops("selected"))

    def test_adjacent_endpoints(self, algo):
        """Start next to end: the path is just the end cell."""
        g = Grid.from_rows([[2, 3]])
        path, stats = run(g, algo)
        assert path == [(1, 0)]
        assert stats.path_length == 1

    def test_solution_marked_on_grid(self, algo, open_grid):
        """Path cells are marked SOLUTION; start and end keep their meaning."""
        path, _ = run(open_grid, algo)
        for c in path[:-1]:
            assert open_grid.get(*c) is CellState.SOLUTION
        assert open_grid.get(4, 4).is_end
        assert open_grid.get(0, 0).is_start

    def test_remove_markings_after_run(self, algo, walled_grid):
        """After remove_markings no search marking is left."""
        before = [[v.base for v in row] for row in walled_grid.as_matrix()]
        run(walled_grid, algo)
        walled_grid.remove_markings()
        assert walled_grid.count(CellState.OPEN, CellState.VISITED, CellState.SOLUTION) == 0
        assert walled_grid.as_matrix() == before

    def test_grid_released(self, algo, open_grid):
        """The grid is editable again once run returns."""
        run(open_grid, algo)
        assert open_grid.mode is GridMode.EDITABLE
        assert open_grid.set_cell_state(2, 2, CellState.OBSTACLE)

    def test_missing_end_fails_loudly(self, algo):
        """A grid without an end is a caller bug and stays editable."""
        g = Grid(3, 3)
        g.set_cell_state(0, 0, CellState.START)
        with pytest.raises(GridStateError):
            run(g, algo)
        assert g.mode is GridMode.EDITABLE

    def test_locked_grid_refused(self, algo, open_grid):
        """No search while a marker is being moved."""
        open_grid.toggle_lock()
        with pytest.raises(GridStateError):
            run(open_grid, algo)
        assert open_grid.locked


class TestOptimality:
    """Both algorithms agree with a BFS reference."""

    @pytest.mark.parametrize("w,h", [(1, 2), (3, 7), (10, 10), (13, 4)])
    def test_obstacle_free_equals_manhattan(self, w, h):
        """On open grids both return the Manhattan distance."""
        lengths = []
        for algo in ALGOS:
            g = Grid.create(w, h)
            path, stats = run(g, algo, NullSink())
            lengths.append(stats.path_length)
            assert len(path) == stats.path_length
        assert lengths == [manhattan((0, 0), (w - 1, h - 1))] * 2

    @pytest.mark.parametrize("seed", range(12))
    def test_random_obstacles(self, seed):
        """Random mazes: both match BFS, including 'no path'."""
        rng = random.Random(seed)
        w, h = rng.randint(4, 14), rng.randint(4, 14)
        rows = [[1 if rng.random() < 0.3 else 0 for _ in range(w)] for _ in range(h)]
        rows[0][0] = 2
        rows[h - 1][w - 1] = 3
        expected = bfs_length(Grid.from_rows(rows))

        for algo in ALGOS:
            g = Grid.from_rows(rows)
            path, stats = run(g, algo)
            assert stats.path_length == expected
            assert stats.success == (expected != -1)
            if expected != -1:
                assert_valid_path(g, path)


class TestDisplayTrace:
    """Order of the calls a search makes on its sink."""

    def test_astar_first_iteration(self, open_grid):
        """A* starts with an immediate flush, then selects start and opens its neighbours."""
        sink = RecordingSink(open_grid)
        run(open_grid, Algorithm.ASTAR, sink)
        ev = sink.events
        assert ev[0].op == "flush_immediate"
        assert [e.op for e in ev[1:4]] == ["unopen", "selected", "flush"]
        assert (ev[2].x, ev[2].y) == (0, 0)
        assert [(e.op, e.x, e.y) for e in ev[4:6]] == [("open", 1, 0), ("open", 0, 1)]
        assert [e.op for e in ev[6:8]] == ["unselected", "visited"]
        assert (ev[6].x, ev[6].y) == (0, 0)

    def test_trace_ends_with_solution(self, open_grid):
        """A successful run ends with the solution cells then an immediate flush."""
        sink = RecordingSink(open_grid)
        path, _ = run(open_grid, Algorithm.DIJKSTRA, sink)
        tail = sink.events[-(len(path) + 1):]
        assert [(e.x, e.y) for e in tail[:-1]] == path
        assert all(e.op == "solution" for e in tail[:-1])
        assert tail[-1].op == "flush_immediate"

    def test_dijkstra_never_opens(self, walled_grid):
        """Dijkstra only selects and visits; it has no open-set markers."""
        sink = RecordingSink(walled_grid)
        run(walled_grid, Algorithm.DIJKSTRA, sink)
        assert not sink.ops("open", "unopen")
        assert len(sink.ops("flush")) == len(sink.ops("selected"))

    def test_selected_then_unselected(self, walled_grid):
        """Every deselect refers to the previously selected cell."""
        for algo in ALGOS:
            walled_grid.remove_markings()
            sink = RecordingSink(walled_grid)
            run(walled_grid, algo, sink)
            selected = [(e.x, e.y) for e in sink.ops("selected")]
            unselected = [(e.x, e.y) for e in sink.ops("unselected")]
            assert unselected == selected[:-1]

    def test_paced_flush_calls_back(self, open_grid):
        """on_flush runs for both paced and immediate flushes."""
        calls = []
        sink = RecordingSink(open_grid, on_flush=lambda: calls.append(1))
        run(open_grid, Algorithm.ASTAR, sink)
        assert len(calls) == len(sink.ops("flush", "flush_immediate"))


class TestStepApi:
    """Driving an algorithm one step at a time."""

    def test_steps_until_done(self, open_grid):
        """step() reports running until the end is reached, then done forever."""
        algo = AStarAlgo()
        algo.init(open_grid)
        assert open_grid.finalized
        results = []
        while True:
            res = algo.step()
            results.append(res)
            if res.finished:
                break
        assert results[-1].status == "done"
        assert all(r.status == "running" for r in results[:-1])
        assert len(results[-1].path) == 8
        assert not open_grid.finalized
        again = algo.step()
        assert again.status == "done" and again.path == results[-1].path

    def test_idle_before_init(self):
        """An algorithm with no grid just reports idle."""
        assert DijkstraAlgo().step().status == "idle"

    def test_iterations_counted(self, open_grid):
        """Iterations count the non-final expansions."""
        algo = DijkstraAlgo()
        algo.init(open_grid, NullSink())
        steps = 0
        while not algo.step().finished:
            steps += 1
        assert algo.stats.iterations == steps
        assert algo.stats.recorded

    def test_exception_releases_grid(self, open_grid):
        """A sink failure mid-run still hands the grid back."""

        class Boom(NullSink):
            def flush(self):
                raise RuntimeError("display gone")

        with pytest.raises(RuntimeError):
            run(open_grid, Algorithm.ASTAR, Boom())
        assert open_grid.mode is GridMode.EDITABLE

    def test_make_algo(self):
        """The factory accepts enum members and labels."""
        assert isinstance(make_algo(Algorithm.ASTAR), AStarAlgo)
        assert isinstance(make_algo("dijkstra"), DijkstraAlgo)


class TestCancellation:
    """CancelToken handling."""

    def test_cancel_before_first_step(self, open_grid):
        """A cancelled token stops the run at the first check."""
        token = CancelToken()
        token.cancel()
        path, stats = run(open_grid, Algorithm.DIJKSTRA, cancel=token)
        assert path == []
        assert not stats.success
        assert stats.path_length == -1
        assert stats.iterations == 0
        assert open_grid.mode is GridMode.EDITABLE

    def test_cancel_from_sink(self, open_grid):
        """Cancelling mid-run ends it at the next iteration boundary."""
        token = CancelToken()

        class CancelOnThirdFlush(NullSink):
            n = 0

            def flush(self):
                self.n += 1
                if self.n == 3:
                    token.cancel()

        path, stats = run(open_grid, Algorithm.ASTAR, CancelOnThirdFlush(), token)
        assert path == []
        assert stats.iterations == 3
        assert not open_grid.finalized

    def test_worker_thread(self, walled_grid):
        """run_in_thread delivers the same result on a worker thread."""
        done = []
        t = run_in_thread(walled_grid, "A*", on_done=done.append)
        t.join(timeout=10)
        assert not t.is_alive()
        assert t.error is None
        path, stats = t.result
        assert stats.path_length == 10
        assert done == [t]

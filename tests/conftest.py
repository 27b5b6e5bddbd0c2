"""
Pytest configuration and shared fixtures.

Grid rows are written top to bottom; 0 empty, 1 obstacle, 2 start, 3 end.
"""

import pytest

from pathfind.core.grid import Grid


@pytest.fixture
def open_grid() -> Grid:
    """5x5 grid, start (0, 0), end (4, 4), no obstacles."""
    return Grid.from_rows([
        [2, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 3],
    ])


@pytest.fixture
def walled_grid() -> Grid:
    """5x5 grid, wall down column 2 with a gap at (2, 4); start (0, 0), end (4, 2)."""
    return Grid.from_rows([
        [2, 0, 1, 0, 0],
        [0, 0, 1, 0, 0],
        [0, 0, 1, 0, 3],
        [0, 0, 1, 0, 0],
        [0, 0, 0, 0, 0],
    ])


@pytest.fixture
def blocked_grid(walled_grid: Grid) -> Grid:
    """The walled grid with its gap closed."""
    walled_grid.set_cell_state(2, 4, 1)
    return walled_grid

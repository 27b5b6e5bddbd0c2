# pathfind/core/editor.py
#!/usr/bin/env python3
"""
Grid editor: what a click on a cell means before a run starts.

- EMPTY <-> OBSTACLE on click.
- Clicking START/END picks the marker up (grid becomes LOCKED, no search may start).
- The next click on an EMPTY/OBSTACLE cell drops it there and unlocks the grid.
- Nothing changes while a search is running.
"""

import logging
from dataclasses import dataclass

from pathfind.core.grid import Grid
from pathfind.core.types import CellState

logger = logging.getLogger(__name__)


@dataclass
class GridEditor:
    grid: Grid

    def click(self, x: int, y: int) -> bool:
        """Apply one user click at (x, y). Returns True if the grid changed."""
        g = self.grid
        with g.lock:
            if g.finalized:
                logger.debug("click at (%d, %d) ignored: search running", x, y)
                return False
            value = g.get(x, y).base
            if value in (CellState.EMPTY, CellState.OBSTACLE):
                if g.locked:
                    marker = g.value_to_move
                    if marker is not None:
                        g.set_cell_state(x, y, marker)
                        logger.debug("dropped %s at (%d, %d)", marker.name, x, y)
                    g.toggle_lock()
                else:
                    flipped = CellState.OBSTACLE if value is CellState.EMPTY else CellState.EMPTY
                    g.set_cell_state(x, y, flipped)
                return True
            if value in (CellState.START, CellState.END):
                if g.locked:
                    return False
                g.toggle_lock()
                g.set_pending_move(value)
                g.set_cell_state(x, y, CellState.EMPTY)
                logger.debug("picked up %s from (%d, %d)", value.name, x, y)
                return True
            return False

    def can_run(self) -> bool:
        return not (self.grid.locked or self.grid.finalized)

    def clear(self) -> bool:
        """Remove search markings; refused while a marker is held or a search runs."""
        if not self.can_run():
            return False
        return self.grid.remove_markings()

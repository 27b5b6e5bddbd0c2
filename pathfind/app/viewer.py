# pathfind/app/viewer.py
#!/usr/bin/env python3
"""
Pathfinding Viewer — grid editor + live search replay + metrics

- Mouse (left click on a cell):
    empty <-> obstacle, click start/end to pick it up, click again to drop it
- Keyboard:
    [A]/[D]      -> run A* / Dijkstra
    [C]          -> clear search markings
    [+]/[-]      -> step delay
    [ESC]        -> cancel running search
    [Q]          -> quit

Settings:
- ENV: PATHFIND_WIDTH, PATHFIND_HEIGHT, PATHFIND_DELAY_MS, PATHFIND_LOG_LEVEL
- CLI: --width=N --height=N --delay=MS --log-level=LEVEL
"""

import logging
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from pathfind.config import DELAY_STEP_MS, LOG_FORMAT, MAX_DELAY_MS, Settings, resolve_settings
from pathfind.core.editor import GridEditor
from pathfind.core.grid import Grid
from pathfind.core.search import SearchThread, run_in_thread
from pathfind.core.sink import GridSink
from pathfind.core.types import Algorithm, Cell, CellState

logger = logging.getLogger(__name__)

PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
GRID_LINE   = ( 60, 64, 72)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATE_COLORS: Dict[CellState, Tuple[int, int, int]] = {
    CellState.EMPTY:             (  0,  0,  0),
    CellState.OBSTACLE:          (255,255,255),
    CellState.START:             (255,  0,  0),
    CellState.END:               (  0,  0,255),
    CellState.EMPTY_SELECTED:    (255,200,  0),
    CellState.OBSTACLE_SELECTED: (128,128,128),  # should never be shown
    CellState.START_SELECTED:    (255,255,  0),
    CellState.END_SELECTED:      (  0,255,  0),
    CellState.OPEN:              (255,255,  0),
    CellState.VISITED:           ( 64, 64, 64),
    CellState.SOLUTION:          (255,200,  0),
}


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, delay_ms: int = 0):
        pygame.init()

        self.grid = grid
        self.editor = GridEditor(grid)
        self.delay_ms = delay_ms
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        # window: longest grid side takes ~720px
        self.cell_size = max(6, 720 // max(grid.width, grid.height))
        win_w = GRID_MARGIN*2 + grid.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.height * self.cell_size, 480)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Pathfinding")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self.selected_algo = Algorithm.ASTAR
        self.search: Optional[SearchThread] = None
        self.sink = GridSink(grid, delay=delay_ms / 1000.0)
        self.state = "Idle"
        self._last_metrics: dict = {}

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window, grid on the left, panel on the right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(4, min(avail_w // self.grid.width, avail_h // self.grid.height)))

        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        grid_right = GRID_MARGIN*2 + self.grid.width * self.cell_size
        self._right_band = pygame.Rect(grid_right, 0, max(PANEL_W, win_w - grid_right), win_h)
        self._build_buttons()

    def run(self):
        while True:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

    # ---------- search control ----------
    @property
    def searching(self) -> bool:
        return self.search is not None and self.search.is_alive()

    def _start_search(self, algo: Algorithm):
        self.selected_algo = algo
        self._refresh_active_states()
        if self.searching or not self.editor.can_run():
            return
        if not self.grid.remove_markings():
            return
        self.state = "Running"
        self.search = run_in_thread(self.grid, algo, self.sink, on_done=self._search_done)

    def _search_done(self, thread: SearchThread):
        # called on the worker thread; only plain attribute writes here
        if thread.error is not None:
            self.state = "Error"
            return
        _, stats = thread.result
        self._last_metrics = stats.as_dict()
        if thread.cancel_token.cancelled:
            self.state = "Cancelled"
        else:
            self.state = "Done" if stats.success else "No path"

    def _cancel_search(self):
        if self.searching:
            self.search.cancel()

    def _clear(self):
        if self.editor.clear():
            self.state = "Idle"

    def _bump_delay(self, dv: int):
        self.delay_ms = int(max(0, min(MAX_DELAY_MS, self.delay_ms + dv)))
        self.sink.delay = self.delay_ms / 1000.0

    # ---------- events ----------
    def _cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        c = (col, row)
        return c if self.grid.in_bounds(c) else None

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_q:
                    self._quit()
                elif e.key == pygame.K_ESCAPE:
                    self._cancel_search()
                elif e.key == pygame.K_a:
                    self._start_search(Algorithm.ASTAR)
                elif e.key == pygame.K_d:
                    self._start_search(Algorithm.DIJKSTRA)
                elif e.key == pygame.K_c:
                    self._clear()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_delay(+DELAY_STEP_MS)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_delay(-DELAY_STEP_MS)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                handled = False
                for b in self._buttons:
                    handled = b.handle_mouse(e) or handled
                if not handled and e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    c = self._cell_at(e.pos)
                    if c is not None:
                        self.editor.click(*c)

    def _quit(self):
        self._cancel_search()
        pygame.quit()
        sys.exit(0)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for row_i, row in enumerate(self.grid.as_matrix()):
            for col_i, v in enumerate(row):
                rect = pygame.Rect(ox + col_i*cs, oy + row_i*cs, cs, cs)
                pygame.draw.rect(self.screen, STATE_COLORS[v], rect)
                pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run A*", lambda: self._start_search(Algorithm.ASTAR), togglable=True, store_as="btn_algo_a"); y += h + gap
        add("Run Dijkstra", lambda: self._start_search(Algorithm.DIJKSTRA), togglable=True, store_as="btn_algo_d"); y += h + gap
        add("Clear", self._clear); y += h + gap
        add("Cancel", self._cancel_search); y += h + gap

        minus_rect = pygame.Rect(x, y, (w-8)//2, h)
        plus_rect  = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Slower", plus_rect, lambda: self._bump_delay(+DELAY_STEP_MS)))
        self._buttons.append(UIButton("Faster", minus_rect, lambda: self._bump_delay(-DELAY_STEP_MS)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_algo_a"):
            self.btn_algo_a.set_active(getattr(self, "selected_algo", None) is Algorithm.ASTAR)
        if hasattr(self, "btn_algo_d"):
            self.btn_algo_d.set_active(getattr(self, "selected_algo", None) is Algorithm.DIJKSTRA)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"State: {self.state}")
        line(f"Algo: {m.get('algo', self.selected_algo.value)}")
        line(f"Iterations: {m.get('iterations', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        line(f"Runtime: {m.get('run_time', 0.0) * 1000:.1f} ms")
        line(f"Delay: {self.delay_ms} ms/step")
        if self.grid.locked:
            line("Placing marker...", color=ACCENT_GOLD)

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    settings: Settings = resolve_settings(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger.info("Starting viewer on %dx%d grid, delay %d ms", settings.width, settings.height, settings.delay_ms)
    Viewer(Grid.create(settings.width, settings.height), settings.delay_ms).run()


if __name__ == "__main__":
    main()

# src/gridkeeper/app/viewer.py
#!/usr/bin/env python3
"""
Solvable Grid Viewer — pygame driver over GridMutator

- Mouse:
    [LEFT]       -> block the clicked cell (rolled back if it cuts the path)
    [RIGHT]      -> regenerate grid
- Keyboard:
    [N]          -> block a random open cell
    [R]          -> regenerate grid
    [S]/[G]      -> relocate start / goal
    [B]/[A]      -> path producer: BFS / A*
    [Q]/[ESC]    -> quit

Config: see gridkeeper.core.config (GRIDKEEPER_* env vars, --field=value args).
"""

import logging
import random
import sys
from typing import List, Optional, Tuple

import pygame

from gridkeeper.core.config import GridConfig, load_map, resolve_config
from gridkeeper.core.mutator import GridMutator, GridSnapshot, MutationResult
from gridkeeper.core.types import Cell

log = logging.getLogger(__name__)

PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
OPEN_GRAY   = (200,200,200)
NEON_MINT   = (0,255,200)
BACKDROP    = (28, 31, 38)
PLATE       = (40, 44, 54)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
TEXT_WARN   = (255,140,100)
ACCENT_GOLD = (255,210,0)

SEARCH_LABELS = {"bfs": "BFS", "astar": "A*"}


# ---------- Panel button ----------
BTN_IDLE    = (36, 40, 48)
BTN_HOVER   = (46, 50, 60)
BTN_ACTIVE  = (58, 86, 160)
BTN_BORDER  = (120, 170, 255)


class UIButton:
    """Clickable panel button; `active` marks the selected search."""

    def __init__(self, label: str, rect: pygame.Rect, callback):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.active = False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        fill = BTN_ACTIVE if self.active else (BTN_HOVER if self.hover else BTN_IDLE)
        pygame.draw.rect(screen, fill, self.rect, border_radius=10)
        if self.active:
            pygame.draw.rect(screen, BTN_BORDER, self.rect, width=2, border_radius=10)
        text = font.render(self.label, True, TEXT_LIGHT)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """Track hover; on a left click inside, fire the callback and report it."""
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
            return False
        hit = event.button == 1 and self.rect.collidepoint(event.pos)
        if hit:
            self.callback()
        return hit


# ---------- Viewer ----------
class Viewer:
    def __init__(self, mutator: GridMutator, config: GridConfig):
        pygame.init()

        self.mutator = mutator
        self.config = config
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        snap = self._snapshot()
        grid_px_w = GRID_MARGIN*2 + snap.width * CELL_SIZE_DEFAULT
        grid_px_h = GRID_MARGIN*2 + snap.height * CELL_SIZE_DEFAULT
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 560)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Solvable Grid")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self.status_msg = "Ready"
        self.status_ok = True

    def _snapshot(self) -> GridSnapshot:
        snap = self.mutator.snapshot()
        if snap is None:
            raise RuntimeError("viewer needs a generated grid")
        return snap

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        snap = self._snapshot()
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // snap.width, avail_h // snap.height)))

        grid_plate_w = snap.width * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = snap.height * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (grid_plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        """Grid cell under a window pixel, or None outside the grid."""
        snap = self._snapshot()
        ox, oy = self._grid_origin
        px, py = pos
        if px < ox or py < oy:
            return None
        col = (px - ox) // self.cell_size
        row = (py - oy) // self.cell_size
        if col >= snap.width or row >= snap.height:
            return None
        return (col, row)

    def run(self):
        while True:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

    # ---------- actions ----------
    def _report(self, action: str, res: MutationResult):
        self.status_ok = res.ok
        self.status_msg = f"{action}: ok" if res.ok else f"{action}: {res.status}"
        if not res.ok:
            log.info("%s %s: %s", action, res.status, res.message)

    def _regenerate(self):
        # keep the current dimensions; a loaded map may differ from cfg.width/height
        snap = self._snapshot()
        res = self.mutator.generate_valid_grid(snap.width, snap.height,
                                               self.config.obstacle_probability,
                                               self.config.max_generation_attempts)
        self._report("Regenerate", res)
        self._layout(*self.screen.get_size())

    def _block_cell(self, cell: Cell):
        snap = self._snapshot()
        if snap.is_block(cell):
            return
        self._report(f"Block {cell}", self.mutator.apply_obstacle(cell))

    def _random_obstacle(self):
        self._report("Random obstacle", self.mutator.add_random_obstacle())

    def _relocate(self, which: str):
        res = self.mutator.relocate_endpoint(which, self.config.max_relocation_attempts)
        self._report(f"Move {which}", res)

    def _switch_search(self, name: str):
        self.mutator.set_search(name)
        self.status_ok = True
        self.status_msg = f"Search: {SEARCH_LABELS[name]}"
        self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_r:
                    self._regenerate()
                elif e.key == pygame.K_n:
                    self._random_obstacle()
                elif e.key == pygame.K_s:
                    self._relocate("start")
                elif e.key == pygame.K_g:
                    self._relocate("goal")
                elif e.key == pygame.K_b:
                    self._switch_search("bfs")
                elif e.key == pygame.K_a:
                    self._switch_search("astar")
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(480, e.w), max(360, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                if e.button == 3:
                    self._regenerate()
                elif e.button == 1:
                    cell = self.cell_at(e.pos)
                    if cell is not None:
                        self._block_cell(cell)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        self.screen.fill(BACKDROP)
        pygame.draw.rect(self.screen, PLATE, self.canvas_rect, border_radius=12)

    def _draw_grid(self):
        snap = self._snapshot()
        cs = self.cell_size
        ox, oy = self._grid_origin

        for row in range(snap.height):
            for col in range(snap.width):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                pygame.draw.rect(self.screen, BLACK if snap.rows[row][col] else OPEN_GRAY, rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        if len(snap.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col, row) in snap.path]
            glow = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.lines(glow, (0, 255, 220, 60), False, pts, 7)
            self.screen.blit(glow, (0,0), special_flags=pygame.BLEND_ADD)
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, 5)

        self._draw_badge(snap.start, BLUE, "S")
        self._draw_badge(snap.goal,  RED,  "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx,cy), max(4, cs//2 - 2))
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, store_as: Optional[str] = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Regenerate", self._regenerate); y += h + gap
        add("Random Obstacle", self._random_obstacle); y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Move Start", pygame.Rect(x, y, half, h),
                                      lambda: self._relocate("start")))
        self._buttons.append(UIButton("Move Goal", pygame.Rect(x + half + 8, y, half, h),
                                      lambda: self._relocate("goal")))
        y += h + gap

        add("Search: BFS", lambda: self._switch_search("bfs"), store_as="btn_bfs"); y += h + gap
        add("Search: A*",  lambda: self._switch_search("astar"), store_as="btn_astar")

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_bfs"):
            self.btn_bfs.active = self.mutator.search == "bfs"
        if hasattr(self, "btn_astar"):
            self.btn_astar.active = self.mutator.search == "astar"

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        snap = self._snapshot()

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
        m = self.mutator.last_metrics
        line(f"Grid: {snap.width} x {snap.height}")
        line(f"Start: {snap.start}   Goal: {snap.goal}")
        line(f"Path Len: {len(snap.path)}")
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Search: {SEARCH_LABELS[self.mutator.search]}")
        line("-" * 26)
        line(self.status_msg, color=TEXT_LIGHT if self.status_ok else TEXT_WARN)

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def build_mutator(cfg: GridConfig) -> GridMutator:
    mutator = GridMutator(cfg.start, cfg.goal, rng=random.Random(cfg.seed),
                          search=cfg.search, randomize_endpoints=cfg.randomize_endpoints)
    if cfg.map_path is not None:
        grid, start, goal = load_map(cfg.map_path)
        res = mutator.load_grid(grid, start, goal)
        if res.ok:
            return mutator
        log.warning("Map %s rejected (%s); generating a random grid instead", cfg.map_path, res.message)
    mutator.generate_valid_grid(cfg.width, cfg.height, cfg.obstacle_probability,
                                cfg.max_generation_attempts)
    return mutator


def main():
    logging.basicConfig(level=logging.INFO)
    try:
        cfg = resolve_config()
        mutator = build_mutator(cfg)
    except (OSError, ValueError) as ex:
        print(f"Failed to start: {ex}")
        sys.exit(1)
    Viewer(mutator, cfg).run()


if __name__ == "__main__":
    main()

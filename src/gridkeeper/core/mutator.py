# src/gridkeeper/core/mutator.py
#!/usr/bin/env python3
"""
GridMutator: owns the grid and keeps it solvable between start and goal.

Every public operation either commits an edit that leaves a start->goal path
in place, or rolls the edit back. Outcomes come back as MutationResult values:

    "committed"  edit applied, path refreshed
    "rejected"   edit undone (obstacle would cut the path / no relocation found)
    "exhausted"  generate_valid_grid ran out of attempts; last grid is kept

Only programmer errors (bad sizes, out-of-bounds cells, unknown names) raise.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
import logging
import random
import threading

from gridkeeper.core.astar import astar
from gridkeeper.core.bfs import bfs
from gridkeeper.core.types import BLOCK, OPEN, Cell, Grid, SearchResult

log = logging.getLogger(__name__)

SEARCHES: Dict[str, Callable[[Grid, Cell, Cell], SearchResult]] = {
    "bfs": bfs,
    "astar": astar,
}

ENDPOINTS = ("start", "goal")


@dataclass
class MutationResult:
    status: str                   # "committed" | "rejected" | "exhausted"
    message: str = ""
    attempts: int = 0
    path: List[Cell] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "committed"


@dataclass(frozen=True)
class GridSnapshot:
    """Read-only view handed to the presentation layer."""
    width: int
    height: int
    rows: Tuple[Tuple[int, ...], ...]
    path: Tuple[Cell, ...]
    start: Cell
    goal: Cell

    def is_block(self, c: Cell) -> bool:
        x, y = c
        return self.rows[y][x] == BLOCK


class GridMutator:
    def __init__(self, start: Cell = (0, 0), goal: Cell = (9, 9), *,
                 rng: Optional[random.Random] = None, search: str = "bfs",
                 randomize_endpoints: bool = False):
        if search not in SEARCHES:
            raise ValueError(f"unknown search {search!r}")
        self.grid: Optional[Grid] = None
        self.start: Cell = tuple(start)
        self.goal: Cell = tuple(goal)
        self.path: List[Cell] = []
        self.rng = rng if rng is not None else random.Random()
        self.search = search
        self.randomize_endpoints = randomize_endpoints
        self.last_metrics: dict = {}
        self._lock = threading.RLock()

    # -------------------- search plumbing --------------------

    def _find_path(self) -> bool:
        """Run the selected search; refresh the path cache. True if a path exists."""
        res = SEARCHES[self.search](self.grid, self.start, self.goal)
        self.last_metrics = res.metrics
        self.path = list(res.path) if res.found else []
        if not res.found:
            log.debug("Path not found from %s to %s", self.start, self.goal)
        return res.found

    def is_solvable(self) -> bool:
        with self._lock:
            if self.grid is None:
                return False
            return bfs(self.grid, self.start, self.goal).found

    def set_search(self, name: str) -> None:
        if name not in SEARCHES:
            raise ValueError(f"unknown search {name!r}")
        with self._lock:
            self.search = name
            if self.grid is not None:
                self._find_path()

    # -------------------- generation --------------------

    def _ensure_start_and_goal_unique(self, width: int, height: int) -> None:
        if self.start == self.goal:
            gx, gy = self.goal
            self.goal = ((gx + 1) % width, (gy + 1) % height)

    def _random_cell(self, width: int, height: int) -> Cell:
        return (self.rng.randrange(width), self.rng.randrange(height))

    def _generate_random_grid(self, width: int, height: int, obstacle_probability: float) -> Grid:
        grid = Grid(width, height, [BLOCK if self.rng.random() < obstacle_probability else OPEN
                                    for _ in range(width * height)])

        if self.randomize_endpoints:
            open_cells = grid.open_cells()
            # fall back to any cell; start/goal get forced open below
            pool = open_cells if len(open_cells) >= 2 else [(i % width, i // width) for i in range(width * height)]
            self.start = self.rng.choice(pool)
            self.goal = self.rng.choice([c for c in pool if c != self.start])

        self._ensure_start_and_goal_unique(width, height)
        grid.set_block(self.start, False)
        grid.set_block(self.goal, False)
        return grid

    def generate_valid_grid(self, width: int, height: int, obstacle_probability: float,
                            max_attempts: int = 100) -> MutationResult:
        if width < 1 or height < 1 or width * height < 2:
            raise ValueError(f"grid {width}x{height} too small for distinct start and goal")
        if not 0.0 <= obstacle_probability <= 1.0:
            raise ValueError(f"obstacle_probability must be in [0, 1], got {obstacle_probability}")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        with self._lock:
            if not self.randomize_endpoints:
                for name, c in (("start", self.start), ("goal", self.goal)):
                    x, y = c
                    if not (0 <= x < width and 0 <= y < height):
                        raise ValueError(f"{name} {c} outside {width}x{height} grid")

            for attempt in range(1, max_attempts + 1):
                self.grid = self._generate_random_grid(width, height, obstacle_probability)
                if self._find_path():
                    log.debug("Generated solvable %dx%d grid on attempt %d", width, height, attempt)
                    return MutationResult("committed", attempts=attempt, path=list(self.path))

            msg = f"Failed to generate a solvable grid after {max_attempts} attempts."
            log.warning(msg)
            return MutationResult("exhausted", message=msg, attempts=max_attempts)

    def load_grid(self, grid: Grid, start: Cell, goal: Cell) -> MutationResult:
        """Adopt a hand-authored grid, only if start->goal is solvable on it."""
        start, goal = tuple(start), tuple(goal)
        if not grid.in_bounds(start) or not grid.in_bounds(goal):
            raise ValueError("start/goal outside the grid")
        if start == goal:
            return MutationResult("rejected", message="start and goal coincide")
        if grid.is_block(start) or not bfs(grid, start, goal).found:
            msg = f"Map has no path from {start} to {goal}"
            log.info(msg)
            return MutationResult("rejected", message=msg, attempts=1)

        with self._lock:
            # own a private copy; the caller keeps theirs
            self.grid = grid.copy()
            self.start, self.goal = start, goal
            self._find_path()
            return MutationResult("committed", attempts=1, path=list(self.path))

    # -------------------- obstacles --------------------

    def apply_obstacle(self, position: Cell) -> MutationResult:
        with self._lock:
            if self.grid is None:
                return MutationResult("rejected", message="no grid generated yet")
            position = tuple(position)
            if not self.grid.in_bounds(position):
                raise ValueError(f"position {position} out of bounds")
            if position == self.start or position == self.goal:
                return MutationResult("rejected", message=f"{position} is an endpoint")

            was_blocked = self.grid.is_block(position)
            self.grid.set_block(position, True)

            if not self._find_path():
                self.grid.set_block(position, was_blocked)
                self._find_path()
                msg = f"Obstacle at {position} would block the path; rolled back"
                log.info(msg)
                return MutationResult("rejected", message=msg, attempts=1, path=list(self.path))

            log.debug("Obstacle committed at %s", position)
            return MutationResult("committed", attempts=1, path=list(self.path))

    def add_random_obstacle(self) -> MutationResult:
        """Block a random open, non-endpoint cell (subject to the solvability check)."""
        with self._lock:
            if self.grid is None:
                return MutationResult("rejected", message="no grid generated yet")
            candidates = [c for c in self.grid.open_cells() if c != self.start and c != self.goal]
            if not candidates:
                return MutationResult("rejected", message="no open cell left to block")
            return self.apply_obstacle(self.rng.choice(candidates))

    # -------------------- endpoints --------------------

    def relocate_endpoint(self, which: str, max_attempts: int = 100) -> MutationResult:
        if which not in ENDPOINTS:
            raise ValueError(f"which must be 'start' or 'goal', got {which!r}")
        with self._lock:
            if self.grid is None:
                return MutationResult("rejected", message="no grid generated yet")

            old = getattr(self, which)
            # captured once; candidates are only checked against this value
            other = self.goal if which == "start" else self.start

            for attempt in range(1, max_attempts + 1):
                candidate = self._random_cell(self.grid.width, self.grid.height)
                if self.grid.is_block(candidate) or candidate == other:
                    continue
                setattr(self, which, candidate)
                if self._find_path():
                    log.debug("Moved %s %s -> %s on attempt %d", which, old, candidate, attempt)
                    return MutationResult("committed", attempts=attempt, path=list(self.path))

            setattr(self, which, old)
            self._find_path()
            msg = f"Could not relocate {which} within {max_attempts} attempts"
            log.info(msg)
            return MutationResult("rejected", message=msg, attempts=max_attempts, path=list(self.path))

    # -------------------- read access --------------------

    def snapshot(self) -> Optional[GridSnapshot]:
        with self._lock:
            if self.grid is None:
                return None
            return GridSnapshot(
                width=self.grid.width,
                height=self.grid.height,
                rows=tuple(tuple(r) for r in self.grid.rows()),
                path=tuple(self.path),
                start=self.start,
                goal=self.goal,
            )

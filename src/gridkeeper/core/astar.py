# src/gridkeeper/core/astar.py
#!/usr/bin/env python3
"""
A* — one expansion per step(), or run() to completion.

Heuristic:
- Manhattan for 4-connected grids. Admissible and consistent under the
  uniform step cost used here, so the first time the goal is popped its
  path is optimal.

Stale entries:
- The frontier has no decrease-key, so a cell can be pushed more than once.
  A popped entry whose priority is above g[u] + h(u) has been superseded
  and is skipped.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from math import inf

from gridkeeper.core.frontier import PriorityFrontier
from gridkeeper.core.types import Cell, Grid, SearchResult, StepResult

Heuristic = Callable[[Cell, Cell], int]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass
class AStarAlgo:
    name: str = "A*"
    heuristic: Heuristic = manhattan

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    frontier: PriorityFrontier = field(default_factory=PriorityFrontier)
    open_set: set = field(default_factory=set)
    closed_set: set = field(default_factory=set)
    g: Dict[Cell, int] = field(default_factory=dict)
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Cell, goal: Cell) -> None:
        """Bind to a grid and endpoints, then seed the frontier."""
        if not grid.in_bounds(start):
            raise ValueError(f"start {start} out of bounds")
        if not grid.in_bounds(goal):
            raise ValueError(f"goal {goal} out of bounds")
        self.grid = grid
        self.start = start
        self.goal = goal
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.grid is None:
            return
        self.frontier.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.g.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False

        s = self.start
        self.g[s] = 0
        self.parent[s] = s
        self.frontier.push(s, self._h(s))
        self.open_set.add(s)

    # -------------------- helpers --------------------

    def _h(self, c: Cell) -> int:
        return self.heuristic(c, self.goal)

    def _neighbors4(self, c: Cell) -> List[Cell]:
        return [n for n in self.grid.neighbors(c) if not self.grid.is_block(n)]

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = [end]
        cur = end
        while self.parent[cur] != cur:
            cur = self.parent[cur]
            path.append(cur)
        path.reverse()
        return path

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion step:
          - Pop the lowest-f node (skipping stale copies).
          - If goal, reconstruct and finish.
          - Else relax neighbors with edge cost 1.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._reconstruct_path(self.goal)
            return StepResult(status="done", path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.frontier:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u, f_u = self.frontier.pop_entry()

        # Ignore stale pops
        if f_u > self.g.get(u, inf) + self._h(u):
            return StepResult(status="running", current=u, metrics=self._metrics())

        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)

        if u == self.goal:
            self.done = True
            path = self._reconstruct_path(u)
            return StepResult(status="done", closed=[u], current=u, path=path,
                              metrics=self._metrics(path_len=len(path)))

        opened_now: List[Cell] = []
        for v in self._neighbors4(u):
            alt = self.g[u] + 1
            if v not in self.g or alt < self.g[v]:
                self.g[v] = alt
                self.parent[v] = u
                self.frontier.push(v, alt + self._h(v))
                if v not in self.closed_set and v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run(self) -> SearchResult:
        """Step until the goal is popped or the frontier runs dry."""
        while True:
            res = self.step()
            if res.status == "done":
                return SearchResult(status="found", path=res.path, metrics=res.metrics)
            if res.status in ("no_path", "idle"):
                return SearchResult(status="not_found", metrics=res.metrics)

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
            "total_cost": self.g.get(self.goal) if self.done else None,
        }


def astar(grid: Grid, start: Cell, goal: Cell, heuristic: Heuristic = manhattan) -> SearchResult:
    algo = AStarAlgo(heuristic=heuristic)
    algo.init(grid, start, goal)
    return algo.run()

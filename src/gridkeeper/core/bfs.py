# src/gridkeeper/core/bfs.py
#!/usr/bin/env python3

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from gridkeeper.core.types import Cell, Grid, SearchResult, StepResult


@dataclass
class BFSAlgo:
    name: str = "BFS"

    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    queue: Deque[Cell] = field(default_factory=deque)
    parent: Dict[Cell, Cell] = field(default_factory=dict)   # doubles as the visited set
    popped_count: int = 0
    done: bool = False
    no_path: bool = False

    def init(self, grid: Grid, start: Cell, goal: Cell) -> None:
        if not grid.in_bounds(start):
            raise ValueError(f"start {start} out of bounds")
        if not grid.in_bounds(goal):
            raise ValueError(f"goal {goal} out of bounds")
        self.grid = grid
        self.start = start
        self.goal = goal
        self.reset()

    def reset(self) -> None:
        if self.grid is None:
            return
        self.queue.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False

        self.queue.append(self.start)
        self.parent[self.start] = self.start

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = [end]
        cur = end
        while cur != self.start:
            cur = self.parent[cur]
            path.append(cur)
        path.reverse()
        return path

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._reconstruct_path(self.goal)
            return StepResult(status="done", path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.queue:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self.queue.popleft()
        self.popped_count += 1

        if u == self.goal:
            self.done = True
            path = self._reconstruct_path(u)
            return StepResult(status="done", closed=[u], current=u, path=path,
                              metrics=self._metrics(path_len=len(path)))

        # mark on enqueue, never re-enqueue
        opened_now: List[Cell] = []
        for v in self.grid.neighbors(u):
            if self.grid.is_block(v) or v in self.parent:
                continue
            self.parent[v] = u
            self.queue.append(v)
            opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run(self) -> SearchResult:
        while True:
            res = self.step()
            if res.status == "done":
                return SearchResult(status="found", path=res.path, metrics=res.metrics)
            if res.status in ("no_path", "idle"):
                return SearchResult(status="not_found", metrics=res.metrics)

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.queue),
            "closed_count": self.popped_count,
            "path_len": path_len,
            "total_cost": path_len - 1 if path_len else None,
        }


def bfs(grid: Grid, start: Cell, goal: Cell) -> SearchResult:
    algo = BFSAlgo()
    algo.init(grid, start, goal)
    return algo.run()


def is_solvable(grid: Grid, start: Cell, goal: Cell) -> bool:
    """Cheap reachability check: hop-count BFS, no cost bookkeeping."""
    return bfs(grid, start, goal).found
